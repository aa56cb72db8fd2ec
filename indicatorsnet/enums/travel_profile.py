from enum import Enum


class TravelProfile(Enum):
    """Travel mode used for isochrone computation."""

    PEDESTRIAN = "PEDESTRIAN"
    BIKE = "BIKE"
    CAR = "CAR"

    @property
    def ors_profile(self) -> str:
        """Routing profile name understood by openrouteservice."""
        return {
            TravelProfile.PEDESTRIAN: "foot-walking",
            TravelProfile.BIKE: "cycling-regular",
            TravelProfile.CAR: "driving-car",
        }[self]
