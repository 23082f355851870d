"""Models for bib number detection results."""

from enum import Enum

from pydantic import BaseModel


class BibStatus(str, Enum):
    """How many bib numbers were found in a photo."""

    NONE = "none"
    SUCCESS = "success"
    MULTIPLE = "multiple"


class BibDetection(BaseModel):
    """Bib numbers detected in a single photo."""

    bib_numbers: list[str]

    @property
    def status(self) -> BibStatus:
        if not self.bib_numbers:
            return BibStatus.NONE
        if len(self.bib_numbers) > 1:
            return BibStatus.MULTIPLE
        return BibStatus.SUCCESS
