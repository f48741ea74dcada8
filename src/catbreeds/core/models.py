"""Catalog item models.

The mapping from The Cat API payload is total: any field missing (or null) in
the payload falls back to an empty string, zero or ``None``. Trait scores are
conceptually 0-5 but are never validated or clamped here.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# Integer trait fields, in the order the API documents them
TRAIT_FIELDS = (
    "adaptability",
    "affection_level",
    "child_friendly",
    "dog_friendly",
    "energy_level",
    "grooming",
    "health_issues",
    "intelligence",
    "shedding_level",
    "social_needs",
    "stranger_friendly",
    "vocalisation",
)

REFERENCE_URL_FIELDS = (
    "cfa_url",
    "vetstreet_url",
    "vcahospitals_url",
    "wikipedia_url",
)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class BreedWeight(BaseModel):
    """Typical weight range, as display strings in both unit systems."""

    model_config = ConfigDict(frozen=True)

    imperial: str = Field(default="", description="Weight range in pounds (e.g. '6 - 10').")
    metric: str = Field(default="", description="Weight range in kilograms (e.g. '3 - 5').")

    @classmethod
    def from_api(cls, data: Any) -> "BreedWeight":
        data = _as_dict(data)
        return cls(
            imperial=data.get("imperial") or "",
            metric=data.get("metric") or "",
        )


class BreedImage(BaseModel):
    """Reference image attached to a breed."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    width: int = 0
    height: int = 0
    url: str = ""

    @classmethod
    def from_api(cls, data: Any) -> "BreedImage":
        data = _as_dict(data)
        return cls(
            id=data.get("id") or "",
            width=data.get("width") or 0,
            height=data.get("height") or 0,
            url=data.get("url") or "",
        )


class CatalogItem(BaseModel):
    """One breed in the catalog.

    ``id`` is the stable identity: the state container de-duplicates pages on
    it and UIs use it as a correlation key. Everything else is descriptive.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Stable breed identifier (e.g. 'abys').")
    name: str = ""
    origin: str = ""
    description: str = ""
    temperament: str = Field(default="", description="Comma-separated temperament adjectives.")
    life_span: str = ""
    weight: BreedWeight = Field(default_factory=BreedWeight)

    adaptability: int = 0
    affection_level: int = 0
    child_friendly: int = 0
    dog_friendly: int = 0
    energy_level: int = 0
    grooming: int = 0
    health_issues: int = 0
    intelligence: int = 0
    shedding_level: int = 0
    social_needs: int = 0
    stranger_friendly: int = 0
    vocalisation: int = 0

    hypoallergenic: int = 0
    image: Optional[BreedImage] = None

    cfa_url: Optional[str] = None
    vetstreet_url: Optional[str] = None
    vcahospitals_url: Optional[str] = None
    wikipedia_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CatalogItem":
        """Map one element of a ``/breeds`` response onto a ``CatalogItem``.

        Args:
            data: Decoded JSON object for a single breed

        Returns:
            CatalogItem with defaults substituted for absent fields

        Raises:
            pydantic.ValidationError: If a present field has an unusable type
                (e.g. a non-numeric trait score)
        """
        fields: dict[str, Any] = {
            "id": data.get("id") or "",
            "name": data.get("name") or "",
            "origin": data.get("origin") or "",
            "description": data.get("description") or "",
            "temperament": data.get("temperament") or "",
            "life_span": data.get("life_span") or "",
            "weight": BreedWeight.from_api(data.get("weight")),
            "hypoallergenic": data.get("hypoallergenic") or 0,
        }
        for trait in TRAIT_FIELDS:
            fields[trait] = data.get(trait) or 0
        for url_field in REFERENCE_URL_FIELDS:
            fields[url_field] = data.get(url_field)
        image = data.get("image")
        if image is not None:
            fields["image"] = BreedImage.from_api(image)
        return cls(**fields)

    def to_api(self) -> dict[str, Any]:
        """Serialize back to the API's snake_case JSON shape."""
        return self.model_dump(mode="json")

    @property
    def temperament_traits(self) -> list[str]:
        """Temperament split into individual trimmed adjectives."""
        return [t.strip() for t in self.temperament.split(",") if t.strip()]
