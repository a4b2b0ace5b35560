"""
hql.reader.options - Reader configuration

    ReaderOptions(tolerant=True)
    ReaderOptions.from_dict({"tolerant": True, "dottedAccess": "opaque"})
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class DottedAccess(Enum):
    """How symbols with an internal dot (``obj.prop``) are read."""

    # (get obj "prop-name") only when the part after the first dot has a hyphen
    HYPHENATED = "hyphenated"
    # never rewritten, always one symbol
    OPAQUE = "opaque"
    # always rewritten to (get obj "rest")
    ALWAYS = "always"


@dataclass(frozen=True)
class ReaderOptions:
    """
    Options for a single parse.

    Attributes:
        tolerant: Recover from structural errors and return partial trees
                  (editor use while the user is typing) instead of raising.
        dotted_access: Policy for dotted symbols, see DottedAccess.
    """

    tolerant: bool = False
    dotted_access: DottedAccess = DottedAccess.HYPHENATED

    def __post_init__(self):
        if not isinstance(self.tolerant, bool):
            raise TypeError(f"tolerant must be a bool, got {self.tolerant!r}")
        if not isinstance(self.dotted_access, DottedAccess):
            try:
                policy = DottedAccess(self.dotted_access)
            except ValueError:
                valid = ", ".join(p.value for p in DottedAccess)
                raise ValueError(
                    f"Unknown dotted access policy {self.dotted_access!r} "
                    f"(expected one of: {valid})"
                ) from None
            object.__setattr__(self, "dotted_access", policy)

    @classmethod
    def from_dict(cls, settings: Optional[dict[str, Any]]) -> "ReaderOptions":
        """
        Build options from editor settings.

        Accepts both the camelCase keys editors send (``dottedAccess``) and
        the Python attribute names. Unknown keys are ignored.
        """
        if not settings:
            return cls()
        kwargs: dict[str, Any] = {}
        if "tolerant" in settings:
            kwargs["tolerant"] = bool(settings["tolerant"])
        for key in ("dotted_access", "dottedAccess"):
            if key in settings:
                kwargs["dotted_access"] = settings[key]
        return cls(**kwargs)


DEFAULT_OPTIONS = ReaderOptions()
TOLERANT_OPTIONS = ReaderOptions(tolerant=True)

__all__ = ["DottedAccess", "ReaderOptions", "DEFAULT_OPTIONS", "TOLERANT_OPTIONS"]
