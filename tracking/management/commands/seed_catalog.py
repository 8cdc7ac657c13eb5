from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from tracking import progress
from tracking.models import Film, Status
from tracking.store import TrackingStore

FILMS = [
    ("2001: A Space Odyssey", "A voyage to Jupiter with the sentient computer HAL after the discovery of a mysterious monolith affecting human evolution.", 149, 1968, "Stanley Kubrick", "4.2"),
    ("Blade Runner 2049", "Young Blade Runner K discovers a long-buried secret that leads him to track down former Blade Runner Rick Deckard.", 164, 2017, "Denis Villeneuve", "4.3"),
    ("The Matrix", "When a beautiful stranger leads computer hacker Neo to a forbidding underworld, he discovers the shocking truth about reality.", 136, 1999, "Lana Wachowski, Lilly Wachowski", "4.1"),
    ("Arrival", "A linguist works with the military to communicate with alien lifeforms after twelve mysterious spacecraft appear around the world.", 116, 2016, "Denis Villeneuve", "4.2"),
    ("Interstellar", "A team of explorers travel through a wormhole in space in an attempt to ensure humanity's survival.", 169, 2014, "Christopher Nolan", "4.3"),
    ("Ex Machina", "A young programmer is selected to participate in a ground-breaking experiment in synthetic intelligence.", 108, 2014, "Alex Garland", "4.1"),
    ("Her", "In a near future, a lonely writer develops an unlikely relationship with an operating system designed to meet his every need.", 126, 2013, "Spike Jonze", "4.0"),
    ("Minority Report", "In a future society, a special police unit is able to arrest murderers before they commit their crimes.", 145, 2002, "Steven Spielberg", "3.9"),
    ("Solaris", "A psychologist is sent to a space station orbiting a planet whose ocean surface exhibits strange phenomena.", 167, 1972, "Andrei Tarkovsky", "4.0"),
    ("Stalker", "A guide leads two men through an area known as the Zone to find a room that grants wishes.", 162, 1979, "Andrei Tarkovsky", "4.1"),
]

SAMPLE_ACCOUNTS = [
    ("john_doe", "password123", "john@email.com"),
    ("jane_smith", "securepass", "jane@email.com"),
    ("admin", "admin123", "admin@email.com"),
]

# (username, film index, percent, rating, notes)
SAMPLE_PROGRESS = [
    ("john_doe", 0, 100, "5.0", "Kubrick's masterpiece. A true cinematic experience that transcends genre."),
    ("john_doe", 2, 100, "4.5", "Mind-bending and revolutionary. Changed how I think about reality."),
    ("john_doe", 4, 100, "4.0", "Nolan at his best. Emotional and scientifically fascinating."),
    ("john_doe", 5, 50, None, "Halfway through. The AI conversations are incredibly well done."),
    ("john_doe", 8, 0, None, "Been meaning to watch this Tarkovsky classic for ages."),
    ("jane_smith", 1, 100, "4.5", "Visually stunning sequel that honors the original perfectly."),
    ("jane_smith", 3, 100, "4.0", "Beautiful and thought-provoking. Amy Adams was incredible."),
    ("jane_smith", 6, 100, "3.5", "Interesting concept but a bit slow for my taste."),
    ("jane_smith", 7, 75, None, "Almost finished. The future crime prediction is fascinating."),
    ("jane_smith", 9, 0, None, "Friend recommended this. Another Tarkovsky film to explore."),
]


class Command(BaseCommand):
    help = "Load the sci-fi film catalog, optionally with sample accounts and progress."

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-samples",
            action="store_true",
            help="Also create the sample accounts and their tracked films.",
        )

    def handle(self, *args, **opts):
        store = TrackingStore()
        if store.film_count():
            self.stdout.write(self.style.WARNING("Catalog already loaded, skipping films."))
            films = store.list_films()
        else:
            with transaction.atomic():
                films = [
                    store.add_film(
                        title,
                        category=Film.Category.MOVIES,
                        synopsis=synopsis,
                        runtime_minutes=runtime,
                        release_year=year,
                        genre="Sci-Fi",
                        director=director,
                        external_rating=Decimal(rating),
                    )
                    for title, synopsis, runtime, year, director, rating in FILMS
                ]
            self.stdout.write(f"Loaded {len(films)} films.")

        if opts["with_samples"]:
            self._seed_samples(store, films)

        self.stdout.write(self.style.SUCCESS("Catalog ready."))

    # ---------------- internal helpers ----------------

    def _seed_samples(self, store: TrackingStore, films):
        if len(films) < len(FILMS):
            self.stderr.write("Catalog is missing films; sample progress not loaded.")
            return
        with transaction.atomic():
            accounts = {}
            for username, password, email in SAMPLE_ACCOUNTS:
                account = store.find_account_by_username(username)
                accounts[username] = account or store.register(username, password, email)

            created = 0
            for username, idx, percent, rating, notes in SAMPLE_PROGRESS:
                account = accounts[username]
                film = films[idx]
                if store.is_tracking(account.id, film.id):
                    continue
                record = store.track_film(account.id, film.id, Status.PLAN_TO_START, notes=notes)
                progress.set_percent(record, percent)
                if rating is not None:
                    progress.set_rating(record, rating)
                store.save_progress(record)
                created += 1
        self.stdout.write(f"Loaded {len(accounts)} sample accounts and {created} progress records.")
