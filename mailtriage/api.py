import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from mailtriage.config import DashboardConfig
from mailtriage.errors import AuthenticationFailure, EmailNotFoundError, StoreFailure
from mailtriage.mocks.store import MockEmailStore
from mailtriage.services.auth.credentials import CredentialStore
from mailtriage.services.email.classification import is_important
from mailtriage.services.email.store import ChromaEmailStore, EmailStore
from mailtriage.services.security.tokens import TokenService
from mailtriage.lib.shared.models.email import NOT_IMPORTANT

from mailtriage.dependencies import *

logger = logging.getLogger(__name__)

# --- Lifecycle Events ---
@asynccontextmanager
async def startup_event(app: FastAPI):

    # Ensure configurations are initialized
    app.state.config = DashboardConfig()
    logging.basicConfig(level=app.state.config.log_level)

    # --- Global Services ---
    # Initialize the store based on configuration
    if app.state.config.use_mock_data:
        logger.info("🎭 STARTING IN DEMO MODE (Mock Data)")
        app.state.email_store = MockEmailStore(app.state.config.mock_data_path)
    else:
        app.state.email_store = ChromaEmailStore(app.state.config)
        logger.info(f"📧 Email store ready (collection '{app.state.config.collection_name}')")

    app.state.token_service = TokenService(app.state.config.token_secret, app.state.config.token_ttl_hours)
    app.state.credential_store = CredentialStore.with_defaults()
    try:
        yield
    finally:
        app.state.email_store.close()
        app.state.email_store = None
        app.state.token_service = None
        app.state.credential_store = None
        logger.info('Services has been shutdown.')

app = FastAPI(
    title="MailTriage API",
    description="Backend API for the MailTriage email dashboard",
    version="0.1.0",
    lifespan=startup_event
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Pydantic Models ---
class LoginRequest(BaseModel):
    email: str
    password: str

class ImportanceRequest(BaseModel):
    isImportant: bool
    classification: Optional[str] = None

class ReadRequest(BaseModel):
    isRead: bool

# --- Error Handlers ---
# Internal detail never crosses the boundary: every failure maps to a fixed message.
@app.exception_handler(AuthenticationFailure)
async def authentication_failure_handler(request: Request, exc: AuthenticationFailure):
    if request.url.path == "/auth/verify":
        return JSONResponse({"valid": False}, status_code=401)
    return JSONResponse({"message": "Invalid credentials"}, status_code=401)

@app.exception_handler(EmailNotFoundError)
async def not_found_handler(request: Request, exc: EmailNotFoundError):
    return JSONResponse({"message": "Email not found"}, status_code=404)

STORE_FAILURE_MESSAGES = {
    "GET": "Failed to fetch emails",
    "PATCH": "Failed to update email",
    "DELETE": "Failed to delete email",
}

@app.exception_handler(StoreFailure)
async def store_failure_handler(request: Request, exc: StoreFailure):
    logger.exception(f"Store failure on {request.method} {request.url.path}", exc_info=exc)
    message = STORE_FAILURE_MESSAGES.get(request.method, "Server error")
    return JSONResponse({"message": message}, status_code=500)

# --- Endpoints ---
@app.get("/health")
async def get_health(config: DashboardConfig = Depends(get_config)):
    return {
        "status": "ok",
        "env": config.env.value,
        "use_mock_data": config.use_mock_data,
    }

@app.post("/auth/login")
async def login(credentials: LoginRequest, credential_store: CredentialStore = Depends(get_credential_store), token_service: TokenService = Depends(get_token_service)):
    account = credential_store.authenticate(credentials.email, credentials.password)
    token = token_service.issue(account)
    logger.info(f"🔐 Issued token for account {account.id}")
    return {"token": token, "user": {"id": account.id, "email": account.email}}

@app.get("/auth/verify")
async def verify(request: Request, token_service: TokenService = Depends(get_token_service)):
    claims = token_service.verify(bearer_token(request))
    return {"valid": True, "user": claims.to_json()}

@app.get("/emails", dependencies=[Depends(require_session)])
def list_emails(email_store: EmailStore = Depends(get_email_store)) -> List[dict]:
    emails = []
    for record in email_store.list_emails():
        data = record.to_json()
        # Legacy documents without either field are reported as regular
        data["classification"] = record.classification or NOT_IMPORTANT
        data["isImportant"] = is_important(record)
        emails.append(data)
    return emails

@app.patch("/emails/{email_id}/importance", dependencies=[Depends(require_session)])
def update_importance(email_id: str, body: ImportanceRequest, email_store: EmailStore = Depends(get_email_store)):
    fields = {"isImportant": body.isImportant}
    if body.classification:
        fields["classification"] = body.classification
    email_store.update_email(email_id, fields)
    return {"success": True}

@app.patch("/emails/{email_id}/read", dependencies=[Depends(require_session)])
def update_read(email_id: str, body: ReadRequest, email_store: EmailStore = Depends(get_email_store)):
    email_store.update_email(email_id, {"isRead": body.isRead})
    return {"success": True}

@app.delete("/emails/{email_id}", dependencies=[Depends(require_session)])
def delete_email(email_id: str, email_store: EmailStore = Depends(get_email_store)):
    email_store.delete_email(email_id)
    return {"success": True}

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
