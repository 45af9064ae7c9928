import json
import datetime
from pathlib import Path
from typing import Dict, List, Any

# ISO Format helper
def get_time(day_offset: int, hour: int, minute: int) -> str:
    """Returns an ISO timestamp relative to today."""
    now = datetime.datetime.now(datetime.timezone.utc)
    target = now + datetime.timedelta(days=day_offset)
    target = target.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return target.isoformat()

# --- Generators ---
# The backup process writes documents in more than one shape, so the mock data does too.

def generate_classified_emails() -> List[Dict[str, Any]]:
    """Documents written by the current classifier: both importance fields set."""
    return [
        {
            "id": "mail_101",
            "subject": "Prep for Launch Meeting later?",
            "sender": "sarah.chen@techflow.com",
            "content": "Hey Alex,\n\nAre we ready for the 2pm Go/No-Go? I'm still waiting on the QA sign-off from Dave. If we don't get it by noon, we might need to delay.\n\nLet me know,\nSarah",
            "date": get_time(0, 9, 15),
            "classification": "IMPORTANT",
            "isImportant": True,
            "isRead": False
        },
        {
            "id": "mail_102",
            "subject": "RE: QA Sign-off",
            "sender": "dave.miller@techflow.com",
            "content": "Sarah/Alex,\n\nApologies for the delay. The build passed all integration tests. You have my GREEN light for the launch.\n\n- Dave",
            "date": get_time(0, 9, 45),
            "classification": "IMPORTANT",
            "isImportant": True,
            "isRead": True
        },
        {
            "id": "mail_103",
            "subject": "Weekly newsletter",
            "sender": "news@techflow.com",
            "content": "This week: office move updates, the new coffee machine, and the Q4 hackathon sign-up sheet.",
            "date": get_time(-1, 7, 0),
            "classification": "NOT_IMPORTANT",
            "isImportant": False,
            "isRead": False
        }
    ]

def generate_legacy_emails() -> List[Dict[str, Any]]:
    """Older documents: a single importance field, legacy `from`/`body`/`timestamp` keys."""
    return [
        {
            "id": "mail_201",
            "subject": "Invoice #4471 overdue",
            "from": "billing@hosting.example",
            "body": "Your invoice #4471 is 14 days overdue. Please settle it to avoid suspension of service.",
            "timestamp": get_time(-2, 16, 30),
            "classification": "important"
        },
        {
            "id": "mail_202",
            "subject": "Dinner tonight?",
            "from": "jessica.doe@gmail.com",
            "body": "Are we still on for sushi after your gym session? I can book a table for 7:30.",
            "timestamp": get_time(0, 12, 0),
            "isImportant": True
        },
        {
            "id": "mail_203",
            "sender": "noreply@drsmithdental.com",
            "body": "Dear Alex,\n\nSee you today at 4:30 PM. Please arrive 10 minutes early.",
            "timestamp": get_time(0, 8, 0)
        }
    ]

def main():
    print("🚀 Generating Mock Data...")

    data = {
        "generated_at": datetime.datetime.now().isoformat(),
        "emails": generate_classified_emails() + generate_legacy_emails()
    }

    # Ensure directory exists
    output_dir = Path("mailtriage/data")
    output_dir.mkdir(parents=True, exist_ok=True)

    output_file = output_dir / "mock_store.json"

    with open(output_file, "w") as f:
        json.dump(data, f, indent=2)

    print(f"✅ Mock data generated at: {output_file.absolute()}")

if __name__ == "__main__":
    main()
