import base64
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Photo extensions accepted for job photos, overridable from .env
ALLOWED_PHOTO_EXTENSIONS = os.getenv("ALLOWED_PHOTO_EXTENSIONS", "jpg,jpeg,png,gif,webp").split(",")

# Photos above this size need an explicit confirmation
MAX_PHOTO_BYTES = int(os.getenv("MAX_PHOTO_BYTES", str(2 * 1024 * 1024)))


def allowed_photo(filename):
    """Check if the file extension is allowed for job photos"""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_PHOTO_EXTENSIONS


def get_image_mime_type(file_path):
    """
    Get MIME type for image based on file extension
    """
    extension = file_path.lower().split('.')[-1]
    mime_types = {
        'png': 'image/png',
        'jpg': 'image/jpeg',
        'jpeg': 'image/jpeg',
        'gif': 'image/gif',
        'bmp': 'image/bmp',
        'webp': 'image/webp'
    }
    return mime_types.get(extension, 'image/jpeg')


def to_data_url(data, filename):
    """Inline image bytes as a data URL, the way photos are kept on a job."""
    encoded = base64.b64encode(data).decode('utf-8')
    return f"data:{get_image_mime_type(filename)};base64,{encoded}"
