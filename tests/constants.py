BASE_URL = "http://localhost:8000"
API_PATH = "/api/v1/files"
BASE_PUBLIC_URL = "https://cdn.example.com/files"
BUCKET_NAME = "filestore-test"

# 1x1 transparent GIF
GIF_DATA_URL = "data:image/gif;base64,R0lGODlhAQABAIAAAP///wAAACH5BAAOw=="
GIF_BYTES = bytes.fromhex("47494638396101000100800000ffffff00000021f904000e")
