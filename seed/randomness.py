import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from faker import Faker

from storefront.config import Settings

BACKDATE_WINDOW_HOURS = 7 * 24
ORDER_OFFSET_HOURS = 24


@dataclass
class RandomSources:
    """Random generators threaded through the seed stages.

    ``fake`` produces names and contact data and is seeded for reproducible
    output.  ``rng`` drives timestamp jitter; it is only reproducible when
    given an explicit seed.
    """

    fake: Faker
    rng: random.Random

    @classmethod
    def from_settings(cls, settings: Settings) -> "RandomSources":
        fake = Faker(settings.faker_locale)
        fake.seed_instance(settings.faker_seed)
        return cls(fake=fake, rng=random.Random(settings.jitter_seed))

    def backdated(self, now: datetime | None = None) -> datetime:
        """Return a whole-hour instant within the past seven days."""
        now = now or datetime.now(UTC)
        return now - timedelta(hours=self.rng.randrange(BACKDATE_WINDOW_HOURS))

    def order_offset(self) -> timedelta:
        """Return a delay in ``[0, 24)`` hours between sign-up and first order."""
        return timedelta(hours=self.rng.randrange(ORDER_OFFSET_HOURS))
