# tracking/console.py
"""
Text menu for the tracker.

TrackerConsole reads numbered choices and free-text answers from an input
stream and writes to an output stream, so it runs the same way under the
`tracker` management command and in tests. It never touches the database
directly: everything goes through the injected TrackingStore.
"""
from __future__ import annotations

import sys
from typing import List, Optional

from . import progress
from .errors import DuplicateTrackingError, TrackerError
from .models import Account, ProgressRecord, Status
from .store import TrackingStore

STATUS_CHOICES = {
    "1": Status.PLAN_TO_START,
    "2": Status.IN_PROGRESS,
    "3": Status.COMPLETED,
}


class EndOfInput(Exception):
    """Raised when the input stream is exhausted."""


def truncate(text: Optional[str], width: int) -> str:
    text = text or ""
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


def format_rating(value) -> str:
    return "Not rated" if value is None else f"{float(value):.1f}/5.0"


class TrackerConsole:

    def __init__(self, store: TrackingStore, stdin=None, stdout=None):
        self.store = store
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.current: Optional[Account] = None

    # ---------------- io helpers ----------------

    def say(self, text: str = "") -> None:
        self.stdout.write(text + "\n")

    def ask(self, prompt: str) -> str:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EndOfInput()
        return line.strip()

    def ask_int(self, prompt: str) -> Optional[int]:
        raw = self.ask(prompt)
        try:
            return int(raw)
        except ValueError:
            self.say("Please enter a number.")
            return None

    def ask_status(self, prompt: str = "Choice: ") -> Optional[Status]:
        self.say("1. Plan to Start")
        self.say("2. In Progress")
        self.say("3. Completed")
        return STATUS_CHOICES.get(self.ask(prompt))

    def ask_rating(self) -> Optional[str]:
        raw = self.ask("Rate this film (1.0-5.0, Enter to skip): ")
        return raw or None

    # ---------------- main loop ----------------

    def run(self) -> None:
        self.say("Film Progress Tracker")
        try:
            while True:
                if self.current is None:
                    done = self.auth_menu()
                else:
                    done = self.main_menu()
                if done:
                    break
        except EndOfInput:
            self.say()
        self.say("Goodbye!")

    def auth_menu(self) -> bool:
        self.say()
        self.say("AUTHENTICATION MENU")
        self.say("1. Login")
        self.say("2. Create Account")
        self.say("3. Exit")
        choice = self.ask("Choose an option: ")
        if choice == "1":
            self.login()
        elif choice == "2":
            self.register()
        elif choice == "3":
            return True
        else:
            self.say("Invalid option. Please try again.")
        return False

    def main_menu(self) -> bool:
        self.say()
        self.say("MAIN MENU")
        self.say("1. Browse Films")
        self.say("2. My Progress")
        self.say("3. Add Film to Tracking")
        self.say("4. Update Progress")
        self.say("5. View Film Statistics")
        self.say("6. Account Settings")
        self.say("7. Logout")
        self.say("8. Exit")
        actions = {
            "1": self.browse_films,
            "2": self.my_progress,
            "3": self.add_film,
            "4": self.update_progress,
            "5": self.film_statistics,
            "6": self.account_settings,
            "7": self.logout,
        }
        choice = self.ask("Choose an option: ")
        if choice == "8":
            return True
        action = actions.get(choice)
        if action is None:
            self.say("Invalid option. Please try again.")
            return False
        try:
            action()
        except TrackerError as e:
            self.say(f"Error: {e}")
        return False

    # ---------------- authentication ----------------

    def login(self) -> None:
        username = self.ask("Username: ")
        password = self.ask("Password: ")
        if not username or not password:
            self.say("Username and password cannot be empty.")
            return
        account = self.store.authenticate(username, password)
        if account is None:
            self.say("Invalid username or password.")
            return
        self.current = account
        self.say(f"Welcome back, {account.username}!")

    def register(self) -> None:
        username = self.ask("Username: ")
        password = self.ask("Password: ")
        email = self.ask("Email (optional): ")
        try:
            self.store.register(username, password, email or None)
        except TrackerError as e:
            self.say(f"Registration failed: {e}")
            return
        self.say("Account created successfully! You can now login.")

    def logout(self) -> None:
        self.current = None
        self.say("Logged out.")

    # ---------------- films ----------------

    def browse_films(self) -> None:
        films = self.store.list_films()
        if not films:
            self.say("No films available.")
            return
        rule = "-" * 90
        self.say(rule)
        self.say(f"{'ID':<3} | {'Title':<35} | {'Year':<4} | {'Director':<20} | {'Rating':<6} | Runtime")
        self.say(rule)
        for f in films:
            rating = f"{float(f.external_rating):.1f}" if f.external_rating is not None else "-"
            runtime = f"{f.runtime_minutes} min" if f.runtime_minutes is not None else "-"
            self.say(
                f"{f.id:<3} | {truncate(f.title, 35):<35} | {f.release_year or 'N/A':<4} | "
                f"{truncate(f.director, 20):<20} | {rating:<6} | {runtime}"
            )
        self.say(rule)

    def film_statistics(self) -> None:
        self.browse_films()
        film_id = self.ask_int("Enter Film ID to view stats (0 to cancel): ")
        if not film_id:
            return
        film = self.store.get_film(film_id)
        stats = self.store.film_stats(film_id)
        self.say(f"Statistics for: {film.title}")
        self.say(f"Total Users Tracking: {stats.total_trackers}")
        self.say(f"Plan to Start: {stats.plan_to_start}")
        self.say(f"In Progress: {stats.in_progress}")
        self.say(f"Completed: {stats.completed}")
        if stats.rated:
            self.say(f"Average User Rating: {stats.average_rating:.1f} ({stats.rated} ratings)")
        else:
            self.say("Average User Rating: No ratings yet")
        if film.external_rating is not None:
            self.say(f"External Rating: {float(film.external_rating):.1f}")

    # ---------------- progress ----------------

    def my_progress(self) -> None:
        records = self.store.records_for_account(self.current.id)
        if not records:
            self.say("You haven't started tracking any films yet.")
            return
        self.print_summary()
        for st in Status:
            self.say()
            self.say(f"{st.label.upper()}:")
            self.print_records([r for r in records if r.status == st])

    def print_records(self, records: List[ProgressRecord]) -> None:
        if not records:
            self.say("  None")
            return
        for r in records:
            line = f"  * {r.film}"
            if r.status == Status.IN_PROGRESS:
                line += f" - {r.percent}% complete"
            elif r.rating is not None:
                line += f" - your rating: {format_rating(r.rating)}"
            self.say(line)

    def print_summary(self) -> None:
        summary = self.store.account_summary(self.current.id)
        self.say(f"Total Films Tracked: {summary.total}")
        self.say(f"Plan to Start: {summary.plan_to_start}")
        self.say(f"In Progress: {summary.in_progress}")
        self.say(f"Completed: {summary.completed}")
        if summary.completed:
            self.say(f"Completion Rate: {summary.completion_rate:.1f}%")

    def add_film(self) -> None:
        self.browse_films()
        film_id = self.ask_int("Enter Film ID to add (0 to cancel): ")
        if not film_id:
            return
        film = self.store.get_film(film_id)
        if self.store.is_tracking(self.current.id, film_id):
            self.say("You are already tracking this film.")
            return
        self.say("Select initial status:")
        status = self.ask_status()
        if status is None:
            self.say("Invalid choice. Defaulting to 'Plan to Start'.")
            status = Status.PLAN_TO_START
        rating = self.ask_rating() if status == Status.COMPLETED else None
        try:
            self.store.track_film(self.current.id, film_id, status, rating=rating)
        except DuplicateTrackingError:
            self.say("You are already tracking this film.")
            return
        self.say(f"'{film.title}' added to your tracking list!")

    def update_progress(self) -> None:
        records = self.store.records_for_account(self.current.id)
        if not records:
            self.say("No films to update.")
            return
        for i, r in enumerate(records, start=1):
            self.say(f"{i}. {r.film} - {Status(r.status).label} ({r.percent}%)")
        choice = self.ask_int("Select film to update (0 to cancel): ")
        if not choice or choice < 1 or choice > len(records):
            return
        record = records[choice - 1]

        self.say(f"Updating: {record.film.title}")
        self.say(f"Current Status: {Status(record.status).label}")
        self.say("1. Change Status")
        self.say("2. Set Percent Watched")
        self.say("3. Rate")
        self.say("4. Add/Edit Notes")
        self.say("5. Stop Tracking")
        self.say("6. Cancel")
        action = self.ask("Choice: ")
        if action == "1":
            self.change_status(record)
        elif action == "2":
            percent = self.ask_int("Percent watched (0-100): ")
            if percent is not None:
                self.store.update_percent(record.id, percent)
                self.say("Progress updated.")
        elif action == "3":
            raw = self.ask("Rating (1.0-5.0, Enter to clear): ")
            self.store.update_rating(record.id, raw or None)
            self.say("Rating updated.")
        elif action == "4":
            self.say(f"Current notes: {record.notes or 'None'}")
            notes = self.ask("Enter new notes (or press Enter to keep current): ")
            if notes:
                self.store.update_notes(record.id, notes)
                self.say("Notes updated.")
        elif action == "5":
            self.store.untrack(record.id)
            self.say(f"Stopped tracking '{record.film.title}'.")

    def change_status(self, record: ProgressRecord) -> None:
        self.say("Select new status:")
        status = self.ask_status()
        if status is None:
            self.say("Invalid choice.")
            return
        # Validate the rating before anything is saved.
        rating = self.ask_rating() if status == Status.COMPLETED else None
        progress.set_status(record, status)
        if rating is not None:
            progress.set_rating(record, rating)
        self.store.save_progress(record)
        self.say("Status updated successfully!")

    # ---------------- account ----------------

    def account_settings(self) -> None:
        account = self.current
        self.say(f"Username: {account.username}")
        self.say(f"Email: {account.email or 'Not provided'}")
        self.say(f"Member since: {account.created_at:%b %d, %Y}")
        self.say("1. Change Password")
        self.say("2. Update Email")
        self.say("3. View Progress Summary")
        self.say("4. Back to Main Menu")
        choice = self.ask("Choice: ")
        if choice == "1":
            current = self.ask("Enter current password: ")
            new = self.ask("Enter new password (min 6 chars): ")
            confirm = self.ask("Confirm new password: ")
            if new != confirm:
                self.say("Passwords do not match.")
                return
            self.current = self.store.change_password(account.id, current, new)
            self.say("Password changed successfully!")
        elif choice == "2":
            email = self.ask("Enter new email (or press Enter to remove): ")
            self.current = self.store.update_email(account.id, email or None)
            self.say("Email updated successfully!")
        elif choice == "3":
            self.print_summary()


def run_console(store: TrackingStore, stdin=None, stdout=None) -> None:
    TrackerConsole(store, stdin=stdin, stdout=stdout).run()
