"""Reionization and neutralization of formal charges."""

from ionipy.charge.catalog import (
    DEFAULT_ACID_BASE_PAIRS,
    AcidBaseCatalog,
    AcidBasePair,
    CatalogCache,
)
from ionipy.charge.corrections import (
    ChargeCorrection,
    apply_charge_corrections,
    default_charge_corrections,
)
from ionipy.charge.events import (
    ChargeEvent,
    EventSink,
    LoggingEventSink,
    RecordingEventSink,
)
from ionipy.charge.reionize import (
    Reionizer,
    SiteMatch,
    strongest_protonated,
    weakest_ionized,
)
from ionipy.charge.uncharge import Uncharger
from ionipy.charge.params import (
    CleanupParameters,
    reionize,
    reionize_in_place,
    uncharge,
    uncharge_in_place,
)

__all__ = [
    # Catalog
    "DEFAULT_ACID_BASE_PAIRS",
    "AcidBaseCatalog",
    "AcidBasePair",
    "CatalogCache",
    # Corrections
    "ChargeCorrection",
    "apply_charge_corrections",
    "default_charge_corrections",
    # Events
    "ChargeEvent",
    "EventSink",
    "LoggingEventSink",
    "RecordingEventSink",
    # Algorithms
    "Reionizer",
    "SiteMatch",
    "strongest_protonated",
    "weakest_ionized",
    "Uncharger",
    # Helpers
    "CleanupParameters",
    "reionize",
    "reionize_in_place",
    "uncharge",
    "uncharge_in_place",
]
