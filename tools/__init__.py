from .aircraft_tools import AircraftTools
from .availability_tools import AvailabilityTools
from .operator_tools import OperatorTools
from .price_matcher import PriceMatcher
from .pricing_tools import PricingTools
from .sanctions_tools import SanctionsTools

__all__ = [
    "AircraftTools",
    "AvailabilityTools",
    "OperatorTools",
    "PriceMatcher",
    "PricingTools",
    "SanctionsTools",
]
