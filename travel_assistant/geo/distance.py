"""Great-circle distance and rough trip estimates."""

import math
from typing import Dict

EARTH_RADIUS_KM = 6371.0

# Straight-line estimate multipliers (per km)
MINUTES_PER_KM = 2
TOLL_WON_PER_KM = 100
TAXI_WON_PER_KM = 1200

# Driving cost model
FUEL_PRICE_WON_PER_LITRE = 1650
FUEL_EFFICIENCY_KM_PER_LITRE = 12
TAXI_BASE_FARE_WON = 4800
TAXI_METRES_PER_UNIT = 132
TAXI_WON_PER_UNIT = 100


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres between two WGS84 points."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def estimate_trip(distance_km: float) -> Dict[str, int]:
    """Estimate duration and fares from a straight-line distance."""
    return {
        "duration_min": round(distance_km * MINUTES_PER_KM),
        "toll_won": round(distance_km * TOLL_WON_PER_KM),
        "taxi_won": round(distance_km * TAXI_WON_PER_KM),
    }


def estimate_driving_costs(distance_km: float) -> Dict[str, int]:
    """Estimate fuel, toll and taxi costs for a driving route.

    Tolls apply only above 10 km: a flat 3,500 won up to 50 km, then 65 won
    per km.
    """
    costs = {
        "fuel_won": round((distance_km / FUEL_EFFICIENCY_KM_PER_LITRE) * FUEL_PRICE_WON_PER_LITRE),
        "taxi_won": round(
            TAXI_BASE_FARE_WON + (distance_km * 1000 / TAXI_METRES_PER_UNIT) * TAXI_WON_PER_UNIT
        ),
    }
    if distance_km > 10:
        costs["toll_won"] = round(distance_km * 65) if distance_km > 50 else 3500
    return costs
