# scripts/seed_demo.py
import os, sys
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from signup.core.config import get_settings
from signup.db.session import Database
from signup.services.session_registry import SessionRegistry

DEMO_SESSIONS = [
    {"title": "Demo", "date": "2025-01-01", "time": "10:00", "location": "Room A",
     "max_participants": 1, "visibility": "public"},
    {"title": "Open workshop", "description": "Bring a laptop", "date": "2025-01-02", "time": "14:00",
     "location": "Lab 3", "max_participants": 20, "visibility": "public"},
    {"title": "Board meeting", "date": "2025-01-03", "time": "09:30", "location": "Room B",
     "visibility": "private"},
]


def main():
    settings = get_settings()
    database = Database(settings.DATABASE_URL)
    database.create_all()
    registry = SessionRegistry(database, settings)
    try:
        existing, _ = registry.list_public()
        if existing:
            print(f"Database already has {len(existing)} public session(s), nothing to seed.")
            return
        created = 0
        for data in DEMO_SESSIONS:
            result, err = registry.create(data)
            if err:
                print(f"Skipped {data['title']!r}: {err}")
                continue
            created += 1
            print(f"{data['title']!r}: id={result['id']} manage={result['management_link']} share={result['share_link']}")
        print(f"Seed done. Sessions created: {created}.")
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
