#!/usr/bin/env python3
"""
Database Setup Script

Verify the MongoDB connection and show what is being collected
"""

import click
from dotenv import load_dotenv
from video_collector.utils.config import load_config, validate_config
from video_collector.database.mongodb_client import MongoDBClient


@click.command()
def main():
  """Setup and verify database"""
  
  print("="*80)
  print("DATABASE SETUP")
  print("="*80)
  
  load_dotenv('.env')

  db = None
  try:
    config = load_config()
    validate_config(config)

    # Initialize client
    print("\nConnecting to MongoDB...")
    db = MongoDBClient(config['database'])
    
    keywords = db.list_keywords()
    
    print("\n✓ Database connection successful!")
    print(f"\nKeywords being collected: {len(keywords)}")
    
    for keyword in keywords:
      stats = db.get_statistics(keyword)
      print(f"\n  {keyword}")
      print(f"    Total videos: {stats['total_videos']}")
      if stats['date_range']['oldest']:
        print(f"    Date range: {stats['date_range']['oldest'].date()} to {stats['date_range']['newest'].date()}")
      else:
        print("    Date range: No videos yet")
    
    print("\n✓ Database is ready for use!")
    
  except Exception as e:
    print(f"\n✗ Error: {e}")
    print("\nTroubleshooting:")
    print("  1. Ensure MongoDB is running (mongod)")
    print("  2. Check MONGO_URI and MONGO_DB in .env or config/config.yaml")
    print("  3. Verify network connectivity")
  finally:
    if db is not None:
      db.close()


if __name__ == "__main__":
  main()
