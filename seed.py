#!/usr/bin/env python3
"""
Seed script for the Habit Tracker database.
This script populates the database with the default tasks and daily goals.
"""

import sys
from app import create_app
from extensions import db
from models import init_default_tasks, Task, GoalDefinition
from services.exceptions import GoalServiceError
from services.goal_service import update_goal_definition

def seed_default_tasks():
    """Seed the database with default tasks and their goals."""
    print("Starting database seeding...")

    app = create_app()

    with app.app_context():
        try:
            # Create all tables if they don't exist
            db.create_all()
            print("Database tables created/verified")

            added_count = init_default_tasks()
            print(f"Added {added_count} new default tasks")

            print("\nDaily goals in database:")
            tasks = Task.query.order_by(Task.display_order).all()
            for task in tasks:
                goal = task.goal_definition
                if goal:
                    print(f"   - {task.name}: {goal.target_type.value} {goal.target_value} {task.unit}")
                else:
                    print(f"   - {task.name}: no goal")

        except Exception as e:
            print(f"Error during seeding: {e}")
            db.session.rollback()
            sys.exit(1)

def clear_goal_definitions():
    """Clear all goal definitions from the database."""
    app = create_app()

    with app.app_context():
        try:
            count = GoalDefinition.query.count()
            if count == 0:
                print("No goal definitions to clear")
                return

            GoalDefinition.query.delete()
            db.session.commit()
            print(f"Cleared {count} goal definitions from database")

        except Exception as e:
            print(f"Error clearing goal definitions: {e}")
            db.session.rollback()
            sys.exit(1)

def set_goal(task_name, target_value, target_type=None):
    """Change the daily goal of one task, looked up by name."""
    app = create_app()

    with app.app_context():
        task = Task.query.filter_by(name=task_name).first()
        if task is None:
            print(f"Unknown task: {task_name}")
            sys.exit(1)

        try:
            goal = update_goal_definition(task.id, target_value=target_value, target_type=target_type)
        except GoalServiceError as e:
            print(f"Error updating goal for {task_name}: {e.message}")
            sys.exit(1)

        print(f"{task.name}: {goal.target_type.value} {goal.target_value} {task.unit}")

def main():
    """Main function to handle command line arguments."""
    if len(sys.argv) > 1:
        if sys.argv[1] == '--clear':
            clear_goal_definitions()
            return
        elif sys.argv[1] == '--set-goal':
            if len(sys.argv) not in (4, 5):
                print("Usage: python seed.py --set-goal TASK_NAME VALUE [EXACT|MINIMUM|MAXIMUM]")
                sys.exit(1)
            set_goal(*sys.argv[2:])
            return
        elif sys.argv[1] == '--help' or sys.argv[1] == '-h':
            print("Habit Tracker Database Seeder")
            print("Usage:")
            print("  python seed.py          - Seed default tasks and goals")
            print("  python seed.py --clear  - Clear goal definitions")
            print("  python seed.py --set-goal NAME VALUE [TYPE] - Change the daily goal of a task")
            print("  python seed.py --help   - Show this help message")
            return
        else:
            print(f"Unknown argument: {sys.argv[1]}")
            print("Use 'python seed.py --help' for usage information")
            sys.exit(1)

    seed_default_tasks()

if __name__ == '__main__':
    main()
