"""
Configuration constants for the media organizer.
"""

# --- File Type Definitions ---
PHOTO_EXTS = {'.jpg', '.jpeg'}
MOVIE_EXTS = {'.mov', '.mp4'}

# --- Metadata Fields ---
# Provider-neutral keys of the property bag returned by every metadata provider.
DATE_TIME_ORIGINAL = 'date_time_original'
CREATE_DATE = 'create_date'
MEDIA_CREATE_DATE = 'media_create_date'
FILE_MODIFY_DATE = 'file_modify_date'
GPS_LATITUDE = 'gps_latitude'

# exifread tag names (photos)
EXIFREAD_TAGS = {
    'EXIF DateTimeOriginal': DATE_TIME_ORIGINAL,
    'GPS GPSLatitude': GPS_LATITUDE,
}

# exiftool JSON keys (movies)
EXIFTOOL_TAGS = {
    'DateTimeOriginal': DATE_TIME_ORIGINAL,
    'CreateDate': CREATE_DATE,
    'MediaCreateDate': MEDIA_CREATE_DATE,
    'FileModifyDate': FILE_MODIFY_DATE,
    'GPSLatitude': GPS_LATITUDE,
}

# Movie capture time priority: Original -> Created -> Media Created -> Modified
MOVIE_DATE_FIELDS = [
    DATE_TIME_ORIGINAL,
    CREATE_DATE,
    MEDIA_CREATE_DATE,
    FILE_MODIFY_DATE,
]

# --- External Tools ---
EXIFTOOL_CMD = "exiftool"
EXIFTOOL_TIMEOUT = 60  # seconds per file

# --- Organization ---
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"
FILENAME_DATE_FORMAT = "%Y-%m-%d %H-%M-%S"
DISAMBIGUATOR = " ({idx})"
