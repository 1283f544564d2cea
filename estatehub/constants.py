import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.dirname(APP_DIR)
CONFIG_DIR = os.path.join(ROOT_DIR, 'config')
CONFIG_FILE = os.environ.get('ESTATEHUB_CONFIG', os.path.join(CONFIG_DIR, 'settings.yaml'))
DB_FILE = os.path.join(CONFIG_DIR, 'estatehub.db')

ESTATEHUB_DB = 'sqlite:///' + DB_FILE

BUILD_VERSION = '20261019_1200'

# Cache key namespace
CACHE_NAMESPACE = 'property:'
CACHE_KEY_PROPERTY_LIST = 'property:list'
CACHE_PREFIX_PROPERTY_DETAIL = 'property:detail:'
CACHE_PREFIX_PROPERTY_SEARCH = 'property:search:'

# Cache TTL in seconds
CACHE_TTL = {
    'property_list': 300,
    'property_detail': 600,
    'property_search': 300,
}

DEFAULT_SETTINGS = {
    "database": {
        "url": ESTATEHUB_DB,
    },
    "redis": {
        "url": "redis://localhost:6379/0",
    },
    "cache": {
        "ttl": dict(CACHE_TTL),
        "invalidate_search_on_write": False,
    },
    "auth": {
        "jwt_secret": "default_jwt_secret_key_123",
        "jwt_algorithm": "HS256",
        "jwt_expires_minutes": 60 * 24 * 7,
    },
    "logging": {
        "level": "INFO",
        "format": "console",
    },
    "ratelimit": {
        "login": "20 per minute",
    },
}

# Property fields exposed through the favorites listing
FAVORITE_PROPERTY_FIELDS = [
    'id',
    'title',
    'type',
    'price',
    'state',
    'city',
    'areaSqFt',
    'bedrooms',
    'bathrooms',
    'amenities',
    'furnished',
    'availableFrom',
    'listedBy',
    'tags',
    'colorTheme',
    'rating',
    'isVerified',
    'listingType',
]

# Search parameters understood by the filter-query builder
SEARCH_EQUALITY_PARAMS = [
    'type',
    'state',
    'city',
    'furnished',
    'listedBy',
    'colorTheme',
    'listingType',
]
SEARCH_NUMERIC_PARAMS = ['bedrooms', 'bathrooms']
SEARCH_RANGE_PARAMS = ['minPrice', 'maxPrice', 'minArea', 'maxArea', 'minRating']
SEARCH_SET_PARAMS = ['amenities', 'tags']

PROPERTY_ID_PREFIX = 'PROP'

RATING_MIN = 0
RATING_MAX = 5

# Largest value an integer column accepts (signed 64-bit)
MAX_DB_INTEGER = 2 ** 63 - 1
