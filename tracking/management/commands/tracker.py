from django.core.management.base import BaseCommand

from tracking.console import TrackerConsole
from tracking.store import TrackingStore


class Command(BaseCommand):
    help = "Start the interactive film progress tracker."
    stealth_options = ("stdin",)

    def handle(self, *args, **opts):
        # Prompts stay on the same line as the answer.
        self.stdout.ending = ""
        console = TrackerConsole(TrackingStore(), stdin=opts.get("stdin"), stdout=self.stdout)
        console.run()
