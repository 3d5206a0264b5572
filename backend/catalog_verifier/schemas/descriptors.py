"""Unit and classification descriptors derived from raw catalog strings."""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel

_LEADING_CODE = re.compile(r"^(\d+)(.*)$", re.DOTALL)


class Dimension(str, Enum):
    VOLUME = "volume"
    WEIGHT = "weight"
    QUANTITY = "quantity"
    LENGTH = "length"
    AREA = "area"
    RATE = "rate"
    UNKNOWN = "unknown"


class UnitDescriptor(BaseModel):
    code: str
    name: Optional[str] = None
    dimension: Dimension = Dimension.UNKNOWN


class ClassificationDescriptor(BaseModel):
    code: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def parse(cls, raw: Optional[str]) -> "ClassificationDescriptor":
        """Split a raw classification string into code and description.

        The first ``-`` separates code from description. Without one, leading
        digits are the code and the rest (if any) the description; without
        leading digits the whole string is the description.

        Examples:
            >>> ClassificationDescriptor.parse("20002871-Type of Engine Oil Target")
            ClassificationDescriptor(code='20002871', description='Type of Engine Oil Target')

            >>> ClassificationDescriptor.parse("10000123")
            ClassificationDescriptor(code='10000123', description=None)

            >>> ClassificationDescriptor.parse("Motor Oils")
            ClassificationDescriptor(code=None, description='Motor Oils')
        """
        if raw is None or not str(raw).strip():
            return cls()
        raw = str(raw).strip()

        if "-" in raw:
            code, description = raw.split("-", 1)
            return cls(code=code.strip() or None, description=description.strip() or None)

        m = _LEADING_CODE.match(raw)
        if m:
            return cls(code=m.group(1), description=m.group(2).strip() or None)

        return cls(code=None, description=raw)

    @property
    def label(self) -> str:
        """Description when present, else the code, else an empty string."""
        return self.description or self.code or ""
