import os
from datetime import timedelta

# DEV defaults. Every value can be overridden from the environment.
SECRET_KEY = os.environ.get("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE = timedelta(
    minutes=int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
)

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./gradeflow.db")

# Answer sheet uploads
PDF_CONTENT_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
BATCH_UPLOAD_WORKERS = int(os.environ.get("BATCH_UPLOAD_WORKERS", "4"))

# Blob storage: "memory" or "s3"
BLOB_BACKEND = os.environ.get("BLOB_BACKEND", "memory")
S3_BUCKET_NAME = os.environ.get("S3_BUCKET_NAME", "gradeflow-answers")
AWS_REGION = os.environ.get("AWS_REGION", "us-east-1")
S3_ENDPOINT_URL = os.environ.get("S3_ENDPOINT_URL") or None

# Grievances
GRIEVANCE_MIN_DESCRIPTION = 50

# Dashboards
RECENT_ITEMS_LIMIT = 5
