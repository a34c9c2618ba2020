"""Seed script to populate the default machine profile and G-code snippets."""
from app import create_app
from web.extensions import db
from web.services.settings_service import SettingsService


def seed_machine_profile():
    """Create the machine profile singleton with default coating settings."""
    profile = SettingsService.get_machine_profile()
    print(f"Machine profile ready: {profile.name}")


def seed_snippets():
    """Seed the default header and footer snippets."""
    added_count = SettingsService.seed_default_snippets()
    if added_count > 0:
        print(f"Seeded {added_count} G-code snippets")
    else:
        print("Snippets already exist, none added")


def seed_all():
    """Run all seed functions."""
    print("Starting database seeding...")
    seed_machine_profile()
    seed_snippets()
    print("Database seeding complete!")


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        db.create_all()
        seed_all()
