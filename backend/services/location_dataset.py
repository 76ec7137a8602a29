"""
Curated popular locations for instant autocomplete.

Searched in-process before any geocoding request is made, so common cities
(and the "Remote" variants job posts use) resolve without network latency.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from domain.models import LocationEntry, LocationKind

MIN_QUERY_LENGTH = 2

_CITY = LocationKind.CITY
_REMOTE = LocationKind.REMOTE

_RAW_LOCATIONS: Tuple[Tuple[str, str, LocationKind], ...] = (
    # United States
    ("New York, New York, United States", "US", _CITY),
    ("Los Angeles, California, United States", "US", _CITY),
    ("Chicago, Illinois, United States", "US", _CITY),
    ("Houston, Texas, United States", "US", _CITY),
    ("Phoenix, Arizona, United States", "US", _CITY),
    ("Philadelphia, Pennsylvania, United States", "US", _CITY),
    ("San Antonio, Texas, United States", "US", _CITY),
    ("San Diego, California, United States", "US", _CITY),
    ("Dallas, Texas, United States", "US", _CITY),
    ("San Jose, California, United States", "US", _CITY),
    ("Austin, Texas, United States", "US", _CITY),
    ("Jacksonville, Florida, United States", "US", _CITY),
    ("Fort Worth, Texas, United States", "US", _CITY),
    ("Columbus, Ohio, United States", "US", _CITY),
    ("San Francisco, California, United States", "US", _CITY),
    ("Charlotte, North Carolina, United States", "US", _CITY),
    ("Indianapolis, Indiana, United States", "US", _CITY),
    ("Seattle, Washington, United States", "US", _CITY),
    ("Denver, Colorado, United States", "US", _CITY),
    ("Boston, Massachusetts, United States", "US", _CITY),
    ("Portland, Oregon, United States", "US", _CITY),
    ("Miami, Florida, United States", "US", _CITY),
    ("Atlanta, Georgia, United States", "US", _CITY),
    ("Las Vegas, Nevada, United States", "US", _CITY),
    ("Detroit, Michigan, United States", "US", _CITY),
    ("Nashville, Tennessee, United States", "US", _CITY),
    # India - metros and tech hubs
    ("Mumbai, Maharashtra, India", "IN", _CITY),
    ("Delhi, Delhi, India", "IN", _CITY),
    ("Bangalore, Karnataka, India", "IN", _CITY),
    ("Hyderabad, Telangana, India", "IN", _CITY),
    ("Chennai, Tamil Nadu, India", "IN", _CITY),
    ("Kolkata, West Bengal, India", "IN", _CITY),
    ("Pune, Maharashtra, India", "IN", _CITY),
    ("Ahmedabad, Gujarat, India", "IN", _CITY),
    # India - state capitals
    ("Jaipur, Rajasthan, India", "IN", _CITY),
    ("Lucknow, Uttar Pradesh, India", "IN", _CITY),
    ("Chandigarh, Chandigarh, India", "IN", _CITY),
    ("Thiruvananthapuram, Kerala, India", "IN", _CITY),
    ("Bhubaneswar, Odisha, India", "IN", _CITY),
    ("Bhopal, Madhya Pradesh, India", "IN", _CITY),
    ("Indore, Madhya Pradesh, India", "IN", _CITY),
    ("Nagpur, Maharashtra, India", "IN", _CITY),
    ("Patna, Bihar, India", "IN", _CITY),
    ("Raipur, Chhattisgarh, India", "IN", _CITY),
    ("Ranchi, Jharkhand, India", "IN", _CITY),
    ("Guwahati, Assam, India", "IN", _CITY),
    ("Dehradun, Uttarakhand, India", "IN", _CITY),
    ("Shimla, Himachal Pradesh, India", "IN", _CITY),
    ("Gangtok, Sikkim, India", "IN", _CITY),
    ("Imphal, Manipur, India", "IN", _CITY),
    ("Shillong, Meghalaya, India", "IN", _CITY),
    ("Kohima, Nagaland, India", "IN", _CITY),
    ("Aizawl, Mizoram, India", "IN", _CITY),
    ("Agartala, Tripura, India", "IN", _CITY),
    ("Itanagar, Arunachal Pradesh, India", "IN", _CITY),
    # India - commercial and industrial
    ("Surat, Gujarat, India", "IN", _CITY),
    ("Vadodara, Gujarat, India", "IN", _CITY),
    ("Rajkot, Gujarat, India", "IN", _CITY),
    ("Visakhapatnam, Andhra Pradesh, India", "IN", _CITY),
    ("Vijayawada, Andhra Pradesh, India", "IN", _CITY),
    ("Guntur, Andhra Pradesh, India", "IN", _CITY),
    ("Nellore, Andhra Pradesh, India", "IN", _CITY),
    ("Kochi, Kerala, India", "IN", _CITY),
    ("Kozhikode, Kerala, India", "IN", _CITY),
    ("Kannur, Kerala, India", "IN", _CITY),
    ("Thrissur, Kerala, India", "IN", _CITY),
    ("Coimbatore, Tamil Nadu, India", "IN", _CITY),
    ("Madurai, Tamil Nadu, India", "IN", _CITY),
    ("Salem, Tamil Nadu, India", "IN", _CITY),
    ("Tiruchirappalli, Tamil Nadu, India", "IN", _CITY),
    ("Tiruppur, Tamil Nadu, India", "IN", _CITY),
    ("Vellore, Tamil Nadu, India", "IN", _CITY),
    # India - IT corridors
    ("Noida, Uttar Pradesh, India", "IN", _CITY),
    ("Gurgaon, Haryana, India", "IN", _CITY),
    ("Faridabad, Haryana, India", "IN", _CITY),
    ("Mysore, Karnataka, India", "IN", _CITY),
    ("Mangalore, Karnataka, India", "IN", _CITY),
    ("Hubli, Karnataka, India", "IN", _CITY),
    ("Belgaum, Karnataka, India", "IN", _CITY),
    # India - Uttar Pradesh
    ("Kanpur, Uttar Pradesh, India", "IN", _CITY),
    ("Ghaziabad, Uttar Pradesh, India", "IN", _CITY),
    ("Agra, Uttar Pradesh, India", "IN", _CITY),
    ("Varanasi, Uttar Pradesh, India", "IN", _CITY),
    ("Meerut, Uttar Pradesh, India", "IN", _CITY),
    ("Allahabad, Uttar Pradesh, India", "IN", _CITY),
    ("Bareilly, Uttar Pradesh, India", "IN", _CITY),
    ("Aligarh, Uttar Pradesh, India", "IN", _CITY),
    ("Moradabad, Uttar Pradesh, India", "IN", _CITY),
    ("Saharanpur, Uttar Pradesh, India", "IN", _CITY),
    ("Gorakhpur, Uttar Pradesh, India", "IN", _CITY),
    # India - Maharashtra
    ("Thane, Maharashtra, India", "IN", _CITY),
    ("Navi Mumbai, Maharashtra, India", "IN", _CITY),
    ("Nashik, Maharashtra, India", "IN", _CITY),
    ("Aurangabad, Maharashtra, India", "IN", _CITY),
    ("Solapur, Maharashtra, India", "IN", _CITY),
    ("Amravati, Maharashtra, India", "IN", _CITY),
    ("Kolhapur, Maharashtra, India", "IN", _CITY),
    # India - Punjab, Haryana, Rajasthan
    ("Ludhiana, Punjab, India", "IN", _CITY),
    ("Amritsar, Punjab, India", "IN", _CITY),
    ("Jalandhar, Punjab, India", "IN", _CITY),
    ("Patiala, Punjab, India", "IN", _CITY),
    ("Bathinda, Punjab, India", "IN", _CITY),
    ("Jodhpur, Rajasthan, India", "IN", _CITY),
    ("Kota, Rajasthan, India", "IN", _CITY),
    ("Udaipur, Rajasthan, India", "IN", _CITY),
    ("Ajmer, Rajasthan, India", "IN", _CITY),
    ("Bikaner, Rajasthan, India", "IN", _CITY),
    # India - West Bengal, Bihar, Jharkhand
    ("Durgapur, West Bengal, India", "IN", _CITY),
    ("Asansol, West Bengal, India", "IN", _CITY),
    ("Siliguri, West Bengal, India", "IN", _CITY),
    ("Gaya, Bihar, India", "IN", _CITY),
    ("Bhagalpur, Bihar, India", "IN", _CITY),
    ("Muzaffarpur, Bihar, India", "IN", _CITY),
    ("Jamshedpur, Jharkhand, India", "IN", _CITY),
    ("Dhanbad, Jharkhand, India", "IN", _CITY),
    ("Bokaro, Jharkhand, India", "IN", _CITY),
    # India - other
    ("Srinagar, Jammu and Kashmir, India", "IN", _CITY),
    ("Jammu, Jammu and Kashmir, India", "IN", _CITY),
    ("Leh, Ladakh, India", "IN", _CITY),
    ("Panaji, Goa, India", "IN", _CITY),
    ("Margao, Goa, India", "IN", _CITY),
    ("Pondicherry, Puducherry, India", "IN", _CITY),
    ("Silchar, Assam, India", "IN", _CITY),
    ("Dibrugarh, Assam, India", "IN", _CITY),
    # United Kingdom
    ("London, England, United Kingdom", "GB", _CITY),
    ("Manchester, England, United Kingdom", "GB", _CITY),
    ("Birmingham, England, United Kingdom", "GB", _CITY),
    ("Leeds, England, United Kingdom", "GB", _CITY),
    ("Glasgow, Scotland, United Kingdom", "GB", _CITY),
    ("Edinburgh, Scotland, United Kingdom", "GB", _CITY),
    ("Liverpool, England, United Kingdom", "GB", _CITY),
    ("Bristol, England, United Kingdom", "GB", _CITY),
    # Canada
    ("Toronto, Ontario, Canada", "CA", _CITY),
    ("Vancouver, British Columbia, Canada", "CA", _CITY),
    ("Montreal, Quebec, Canada", "CA", _CITY),
    ("Calgary, Alberta, Canada", "CA", _CITY),
    ("Ottawa, Ontario, Canada", "CA", _CITY),
    ("Edmonton, Alberta, Canada", "CA", _CITY),
    # Australia
    ("Sydney, New South Wales, Australia", "AU", _CITY),
    ("Melbourne, Victoria, Australia", "AU", _CITY),
    ("Brisbane, Queensland, Australia", "AU", _CITY),
    ("Perth, Western Australia, Australia", "AU", _CITY),
    ("Adelaide, South Australia, Australia", "AU", _CITY),
    # Europe
    ("Berlin, Germany", "DE", _CITY),
    ("Munich, Germany", "DE", _CITY),
    ("Hamburg, Germany", "DE", _CITY),
    ("Paris, France", "FR", _CITY),
    ("Lyon, France", "FR", _CITY),
    ("Marseille, France", "FR", _CITY),
    ("Madrid, Spain", "ES", _CITY),
    ("Barcelona, Spain", "ES", _CITY),
    ("Rome, Italy", "IT", _CITY),
    ("Milan, Italy", "IT", _CITY),
    ("Amsterdam, Netherlands", "NL", _CITY),
    ("Brussels, Belgium", "BE", _CITY),
    ("Vienna, Austria", "AT", _CITY),
    ("Zurich, Switzerland", "CH", _CITY),
    ("Stockholm, Sweden", "SE", _CITY),
    ("Copenhagen, Denmark", "DK", _CITY),
    ("Dublin, Ireland", "IE", _CITY),
    ("Lisbon, Portugal", "PT", _CITY),
    # Asia
    ("Singapore, Singapore", "SG", _CITY),
    ("Tokyo, Japan", "JP", _CITY),
    ("Seoul, South Korea", "KR", _CITY),
    ("Hong Kong, Hong Kong", "HK", _CITY),
    ("Dubai, United Arab Emirates", "AE", _CITY),
    ("Shanghai, China", "CN", _CITY),
    ("Beijing, China", "CN", _CITY),
    ("Bangkok, Thailand", "TH", _CITY),
    ("Kuala Lumpur, Malaysia", "MY", _CITY),
    # Remote work
    ("Remote", "REMOTE", _REMOTE),
    ("Remote - United States", "US", _REMOTE),
    ("Remote - Europe", "EU", _REMOTE),
    ("Remote - Worldwide", "GLOBAL", _REMOTE),
)


def _assert_unique_names(entries: Iterable[LocationEntry]) -> None:
    seen: set[str] = set()
    for entry in entries:
        if entry.name in seen:
            raise ValueError(f"Duplicate location name in dataset: {entry.name}")
        seen.add(entry.name)


POPULAR_LOCATIONS: Tuple[LocationEntry, ...] = tuple(
    LocationEntry(name=name, country_code=code, kind=kind) for name, code, kind in _RAW_LOCATIONS
)
_assert_unique_names(POPULAR_LOCATIONS)


def is_query_too_short(query: str | None) -> bool:
    return not query or len(query) < MIN_QUERY_LENGTH


def search_local_locations(
    query: str,
    limit: int = 5,
    dataset: Sequence[LocationEntry] = POPULAR_LOCATIONS,
) -> List[LocationEntry]:
    """
    Case-insensitive substring search over the curated dataset.

    No fuzzy matching and no ranking: matches come back in dataset order,
    capped at `limit`. Queries shorter than MIN_QUERY_LENGTH match nothing.
    """
    if is_query_too_short(query) or limit <= 0:
        return []

    needle = query.lower()
    matches: List[LocationEntry] = []
    for entry in dataset:
        if needle in entry.name.lower():
            matches.append(entry)
            if len(matches) >= limit:
                break
    return matches
