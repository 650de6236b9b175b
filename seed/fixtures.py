"""Fixture loading: YAML documents describing the catalogue to seed.

All files matching a glob are parsed and merged in sorted order; each
section list of a later file is appended to the lists collected so far.
Keys may be written ``snake_case`` or ``PascalCase``::

    categories:
      - name: Shirts
    products:
      - CategoryName: Shirts
        Name: Oxford Shirt
        ...
"""

import glob
import logging
from decimal import Decimal
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_pascal

from seed.errors import FixtureLoadError

logger = logging.getLogger(__name__)


class _Fixture(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="forbid",
    )


class CategorySeed(_Fixture):
    name: str


class ColorSeed(_Fixture):
    name: str
    code: str


class SizeSeed(_Fixture):
    name: str
    code: str


class ImageSeed(_Fixture):
    url: str


class ColorVariationSeed(_Fixture):
    color_name: str
    images: list[ImageSeed] = []


class SizeVariationSeed(_Fixture):
    size_name: str


class ProductSeed(_Fixture):
    category_name: str
    name: str
    name_with_slug: str = ""
    code: str
    price: Decimal
    description: str = ""
    made_country: str = ""
    color_variations: list[ColorVariationSeed] = []
    size_variations: list[SizeVariationSeed] = []


class StoreSeed(_Fixture):
    name: str
    phone: str = ""
    email: str = ""
    country: str = ""
    zip: str = ""
    city: str = ""
    region: str = ""
    address: str = ""
    latitude: float = 0.0
    longitude: float = 0.0


class Seeds(_Fixture):
    categories: list[CategorySeed] = []
    colors: list[ColorSeed] = []
    sizes: list[SizeSeed] = []
    products: list[ProductSeed] = []
    stores: list[StoreSeed] = []

    def merge(self, other: "Seeds") -> "Seeds":
        return Seeds(
            categories=self.categories + other.categories,
            colors=self.colors + other.colors,
            sizes=self.sizes + other.sizes,
            products=self.products + other.products,
            stores=self.stores + other.stores,
        )


def load_seed_file(path: Path) -> Seeds:
    """Parse and validate a single fixture file."""
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise FixtureLoadError(f"load fixture file {str(path)!r} failure, got err {exc}") from exc

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise FixtureLoadError(
            f"fixture file {str(path)!r} must contain a mapping, got {type(document).__name__}"
        )

    try:
        return Seeds.model_validate(document)
    except ValidationError as exc:
        raise FixtureLoadError(f"invalid fixture file {str(path)!r}: {exc}") from exc


def load_seeds(pattern: str) -> Seeds:
    """Load and merge every fixture file matching *pattern*."""
    paths = sorted(glob.glob(pattern))
    if not paths:
        raise FixtureLoadError(f"no fixture files match {pattern!r}")

    seeds = Seeds()
    for path in paths:
        seeds = seeds.merge(load_seed_file(Path(path)))
        logger.debug("Loaded fixture file %s", path)

    logger.info(
        "Loaded %d fixture file(s): %d categories, %d colors, %d sizes, %d products, %d stores",
        len(paths),
        len(seeds.categories),
        len(seeds.colors),
        len(seeds.sizes),
        len(seeds.products),
        len(seeds.stores),
    )
    return seeds
