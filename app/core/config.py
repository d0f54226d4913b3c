import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./jobboard.db")

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# ✅ Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
STRIPE_JOB_POST_PRICE_ID = os.getenv("STRIPE_JOB_POST_PRICE_ID")

# ✅ Cloudinary (media host for CVs and logos)
CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")

# ✅ Frontend
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:9002")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:9002,http://127.0.0.1:9002").split(",")
    if origin.strip()
]

# ✅ Job credits
FREE_JOB_POSTS = int(os.getenv("FREE_JOB_POSTS", "1"))

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
