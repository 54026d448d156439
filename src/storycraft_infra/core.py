from tenacity import stop_after_attempt, wait_exponential

# Shared retry configuration
# usage: @retry(**RETRY_CONFIG)
RETRY_CONFIG = {
    "stop": stop_after_attempt(3),
    "wait": wait_exponential(multiplier=1, min=4, max=10),
    "reraise": True,
}

APP_NAME = "storycraft"

# Platform APIs that must be enabled before anything else is created.
# They stay enabled on teardown.
REQUIRED_APIS = [
    "aiplatform.googleapis.com",
    "artifactregistry.googleapis.com",
    "cloudresourcemanager.googleapis.com",
    "cloudtrace.googleapis.com",
    "firestore.googleapis.com",
    "iam.googleapis.com",
    "iamcredentials.googleapis.com",
    "logging.googleapis.com",
    "monitoring.googleapis.com",
    "run.googleapis.com",
    "storage.googleapis.com",
    "translate.googleapis.com",
]

# Project-level roles granted to the runtime service account
SERVICE_ACCOUNT_ID = "storycraft-service"
SERVICE_ACCOUNT_DISPLAY_NAME = "StoryCraft Cloud Run Service Account"
SERVICE_ACCOUNT_ROLES = [
    "roles/aiplatform.user",
    "roles/storage.admin",
    "roles/datastore.user",
    "roles/iam.serviceAccountTokenCreator",
    "roles/cloudtranslate.user",
    "roles/logging.logWriter",
    "roles/monitoring.metricWriter",
    "roles/cloudtrace.agent",
]

# Storage bucket policy
BUCKET_OBJECT_ROLE = "roles/storage.objectAdmin"
BUCKET_OBJECT_MAX_AGE_DAYS = 30
BUCKET_CORS_ORIGINS = ["*"]
BUCKET_CORS_METHODS = ["GET", "HEAD", "PUT", "POST", "DELETE"]
BUCKET_CORS_RESPONSE_HEADERS = ["*"]
BUCKET_CORS_MAX_AGE_SECONDS = 3600

# Firestore
FIRESTORE_TYPE = "FIRESTORE_NATIVE"
STORY_COLLECTION = "stories"
OWNER_FIELD = "userId"
LAST_MODIFIED_FIELD = "updatedAt"

# Artifact Registry / build
DEFAULT_REPOSITORY_ID = "storycraft"
DEFAULT_IMAGE_NAME = "storycraft-app"
DEFAULT_BUILD_CONTEXT = "app"
BUILD_DEFINITION_FILE = "Dockerfile"
IMAGE_TAG_LENGTH = 12

# Cloud Run
DEFAULT_SERVICE_NAME = "storycraft"
INVOKER_ROLE = "roles/run.invoker"
PUBLIC_MEMBER = "allUsers"

# OAuth
OAUTH_CALLBACK_PATH = "/api/auth/callback/google"
OAUTH_SETUP_REMINDER = (
    "Add the oauth_redirect_uri output to the Authorized redirect URIs of your "
    "Google OAuth 2.0 client (APIs & Services > Credentials) before signing in."
)

# Environment variables set by the stack or by Cloud Run itself.
# Extra variables supplied through config may not reuse these names.
MANAGED_ENV_VARS = [
    "GOOGLE_CLOUD_PROJECT_ID",
    "GOOGLE_CLOUD_REGION",
    "FIRESTORE_DATABASE_ID",
    "GCS_BUCKET_NAME",
    "GCS_STORAGE_URI",
    "NODE_ENV",
    "NEXT_TELEMETRY_DISABLED",
    "NEXTAUTH_URL",
    "AUTH_SECRET",
    "AUTH_TRUST_HOST",
    "AUTH_GOOGLE_ID",
    "AUTH_GOOGLE_SECRET",
]
CLOUD_RUN_RESERVED_ENV_VARS = ["PORT", "K_SERVICE", "K_REVISION", "K_CONFIGURATION"]
