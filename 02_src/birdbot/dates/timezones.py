"""Region code to IANA zone table.

Countries spanning several zones map to the capital or most populated
zone. Subnational codes inherit their country's zone unless listed.
"""

REGION_TIMEZONES = {
    # Asia
    "SG": "Asia/Singapore",
    "MY": "Asia/Kuala_Lumpur",
    "TH": "Asia/Bangkok",
    "VN": "Asia/Ho_Chi_Minh",
    "ID": "Asia/Jakarta",
    "PH": "Asia/Manila",
    "JP": "Asia/Tokyo",
    "CN": "Asia/Shanghai",
    "IN": "Asia/Kolkata",
    "KR": "Asia/Seoul",
    "KP": "Asia/Pyongyang",
    "TW": "Asia/Taipei",
    "HK": "Asia/Hong_Kong",
    "MO": "Asia/Macau",
    "MM": "Asia/Yangon",
    "KH": "Asia/Phnom_Penh",
    "LA": "Asia/Vientiane",
    "BN": "Asia/Brunei",
    "NP": "Asia/Kathmandu",
    "BD": "Asia/Dhaka",
    "LK": "Asia/Colombo",
    "PK": "Asia/Karachi",
    "MV": "Indian/Maldives",
    "MN": "Asia/Ulaanbaatar",
    # Americas
    "US": "America/New_York",
    "CA": "America/Toronto",
    "MX": "America/Mexico_City",
    "BR": "America/Sao_Paulo",
    "AR": "America/Argentina/Buenos_Aires",
    "CL": "America/Santiago",
    "CO": "America/Bogota",
    "PE": "America/Lima",
    "CR": "America/Costa_Rica",
    "PA": "America/Panama",
    "EC": "America/Guayaquil",
    "VE": "America/Caracas",
    "BO": "America/La_Paz",
    "UY": "America/Montevideo",
    "PY": "America/Asuncion",
    "CU": "America/Havana",
    "PR": "America/Puerto_Rico",
    "JM": "America/Jamaica",
    "TT": "America/Port_of_Spain",
    "BS": "America/Nassau",
    "GT": "America/Guatemala",
    "HN": "America/Tegucigalpa",
    "NI": "America/Managua",
    "SV": "America/El_Salvador",
    "BZ": "America/Belize",
    # US states outside Eastern time
    "US-CA": "America/Los_Angeles",
    "US-WA": "America/Los_Angeles",
    "US-OR": "America/Los_Angeles",
    "US-NV": "America/Los_Angeles",
    "US-AZ": "America/Phoenix",
    "US-CO": "America/Denver",
    "US-UT": "America/Denver",
    "US-NM": "America/Denver",
    "US-MT": "America/Denver",
    "US-WY": "America/Denver",
    "US-ID": "America/Boise",
    "US-TX": "America/Chicago",
    "US-IL": "America/Chicago",
    "US-MN": "America/Chicago",
    "US-WI": "America/Chicago",
    "US-IA": "America/Chicago",
    "US-MO": "America/Chicago",
    "US-KS": "America/Chicago",
    "US-NE": "America/Chicago",
    "US-SD": "America/Chicago",
    "US-ND": "America/Chicago",
    "US-OK": "America/Chicago",
    "US-AR": "America/Chicago",
    "US-LA": "America/Chicago",
    "US-MS": "America/Chicago",
    "US-AL": "America/Chicago",
    "US-AK": "America/Anchorage",
    "US-HI": "Pacific/Honolulu",
    # Canadian provinces
    "CA-BC": "America/Vancouver",
    "CA-AB": "America/Edmonton",
    "CA-SK": "America/Regina",
    "CA-MB": "America/Winnipeg",
    "CA-ON": "America/Toronto",
    "CA-QC": "America/Toronto",
    "CA-NS": "America/Halifax",
    "CA-NB": "America/Moncton",
    "CA-NL": "America/St_Johns",
    "CA-PE": "America/Halifax",
    # Europe
    "GB": "Europe/London",
    "GB-ENG": "Europe/London",
    "GB-SCT": "Europe/London",
    "GB-WLS": "Europe/London",
    "GB-NIR": "Europe/London",
    "DE": "Europe/Berlin",
    "FR": "Europe/Paris",
    "ES": "Europe/Madrid",
    "IT": "Europe/Rome",
    "NL": "Europe/Amsterdam",
    "BE": "Europe/Brussels",
    "SE": "Europe/Stockholm",
    "NO": "Europe/Oslo",
    "DK": "Europe/Copenhagen",
    "FI": "Europe/Helsinki",
    "IE": "Europe/Dublin",
    "PT": "Europe/Lisbon",
    "AT": "Europe/Vienna",
    "CH": "Europe/Zurich",
    "PL": "Europe/Warsaw",
    "RU": "Europe/Moscow",
    "GR": "Europe/Athens",
    "CZ": "Europe/Prague",
    "HU": "Europe/Budapest",
    "RO": "Europe/Bucharest",
    "UA": "Europe/Kyiv",
    "HR": "Europe/Zagreb",
    "BG": "Europe/Sofia",
    "RS": "Europe/Belgrade",
    "SK": "Europe/Bratislava",
    "SI": "Europe/Ljubljana",
    "IS": "Atlantic/Reykjavik",
    "EE": "Europe/Tallinn",
    "LV": "Europe/Riga",
    "LT": "Europe/Vilnius",
    "LU": "Europe/Luxembourg",
    "MT": "Europe/Malta",
    "CY": "Asia/Nicosia",
    # Oceania
    "AU": "Australia/Sydney",
    "AU-NSW": "Australia/Sydney",
    "AU-VIC": "Australia/Melbourne",
    "AU-QLD": "Australia/Brisbane",
    "AU-WA": "Australia/Perth",
    "AU-SA": "Australia/Adelaide",
    "AU-TAS": "Australia/Hobart",
    "AU-NT": "Australia/Darwin",
    "NZ": "Pacific/Auckland",
    "FJ": "Pacific/Fiji",
    "PG": "Pacific/Port_Moresby",
    # Africa
    "ZA": "Africa/Johannesburg",
    "KE": "Africa/Nairobi",
    "TZ": "Africa/Dar_es_Salaam",
    "EG": "Africa/Cairo",
    "MA": "Africa/Casablanca",
    "NG": "Africa/Lagos",
    "ET": "Africa/Addis_Ababa",
    "UG": "Africa/Kampala",
    "GH": "Africa/Accra",
    "NA": "Africa/Windhoek",
    "BW": "Africa/Gaborone",
    "ZW": "Africa/Harare",
    "ZM": "Africa/Lusaka",
    "MZ": "Africa/Maputo",
    "MG": "Indian/Antananarivo",
    "MU": "Indian/Mauritius",
    "RW": "Africa/Kigali",
    # Middle East
    "IL": "Asia/Jerusalem",
    "TR": "Europe/Istanbul",
    "SA": "Asia/Riyadh",
    "AE": "Asia/Dubai",
    "QA": "Asia/Qatar",
    "KW": "Asia/Kuwait",
    "BH": "Asia/Bahrain",
    "OM": "Asia/Muscat",
    "JO": "Asia/Amman",
    "LB": "Asia/Beirut",
    "IR": "Asia/Tehran",
    "IQ": "Asia/Baghdad",
}
