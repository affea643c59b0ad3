from datetime import date, timedelta

from challenge_coach import create_app
from challenge_coach.extensions import db
from challenge_coach.models import User, Challenge, Message

app = create_app()

# Demo accounts: user1 is the challenger, user2 coaches
USERS = [
    ("user1", "user1-pass-2024"),
    ("user2", "user2-pass-2024"),
]

CHALLENGES = [
    {
        "title": "30 Days Workout Challenge",
        "description": "Complete daily workout routines for 30 days",
        "days": 30,
        "proof_requirements": "Photo or video of workout completion",
        "messages": [
            ("user1", "Started my first workout today!", "https://example.com/workout1.jpg", True, True),
            ("user2", "Great form! Keep it up!", None, False, False),
        ],
    },
    {
        "title": "Healthy Eating Challenge",
        "description": "Eat clean and track all meals",
        "days": 14,
        "proof_requirements": "Photos of prepared meals",
        "messages": [
            ("user1", "My healthy lunch for today", "https://example.com/meal1.jpg", True, False),
            ("user2", "Remember to include more protein in your meals", None, False, False),
        ],
    },
]

with app.app_context():
    db.create_all()

    users = {}
    for username, password in USERS:
        user = User.query.filter_by(username=username).first()
        if user:
            print(f"User '{username}' already exists.")
        else:
            user = User(username=username)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            print(f"Created user '{username}' (password: {password})")
        users[username] = user

    for entry in CHALLENGES:
        if Challenge.query.filter_by(title=entry["title"]).first():
            print(f"Challenge '{entry['title']}' already exists.")
            continue

        challenge = Challenge(
            title=entry["title"],
            description=entry["description"],
            start_date=date.today(),
            end_date=date.today() + timedelta(days=entry["days"]),
            frequency="Daily",
            proof_requirements=entry["proof_requirements"],
            status="active",
            user_id=users["user1"].id,
            coach_id=users["user2"].id,
        )
        db.session.add(challenge)
        db.session.flush()

        for author, text, image_url, is_proof, is_validated in entry["messages"]:
            db.session.add(Message(
                challenge_id=challenge.id,
                user_id=users[author].id,
                text=text,
                image_url=image_url,
                is_proof=is_proof,
                is_validated=is_validated,
            ))
        db.session.commit()
        print(f"Created challenge '{challenge.title}' with {len(entry['messages'])} messages")
