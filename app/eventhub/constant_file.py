from dotenv import load_dotenv
import os

# Load environment variables from .env
load_dotenv()

DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST")
DB_PORT = os.getenv("DB_PORT", 5432)
DB_NAME = os.getenv("DB_NAME")


def database_url():
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if DB_USER and DB_HOST and DB_NAME:
        return f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    return "sqlite:///./eventhub.db"


# Tokens
jwt_secret = os.getenv("JWT_SECRET", "your-secret-key")
jwt_algorithm = "HS256"
jwt_expires_days = int(os.getenv("JWT_EXPIRES_DAYS", 7))

# QR token encryption
encryption_key = os.getenv("ENCRYPTION_KEY", "default-key")

# Mail
smtp_host = os.getenv("SMTP_HOST", "smtp.gmail.com")
smtp_port = int(os.getenv("SMTP_PORT", 587))
eventhub_email = os.getenv("EVENTHUB_EMAIL")
eventhub_email_password = os.getenv("EVENTHUB_EMAIL_PASSWORD")
ticket_subject = "Your registration for {event_title}"

cors_origins = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*,http://localhost:3000").split(",")
    if origin.strip()
]
log_level = os.getenv("LOG_LEVEL", "INFO")

# Seed
admin_email = os.getenv("ADMIN_EMAIL", "admin@college.edu")
admin_password = os.getenv("ADMIN_PASSWORD")
admin_name = os.getenv("ADMIN_NAME", "Administrator")
