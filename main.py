from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.domains.transactions.routes import router as transaction_router
from app.domains.transactions.store import TransactionStore
from app.domains.transactions.services import TransactionService
from app.domains.transactions.invalidation import ViewInvalidator
from app.config.mongodb import MongoDB
from app.config.setting import settings
import logging
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)

app = FastAPI(title=settings.app_name)

logging.info(f"Allowed origins: {settings.parsed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.parsed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup():
    mongodb = MongoDB(
        uri=settings.mongo_uri,
        db_name=settings.mongo_db_name,
        timeout_seconds=settings.store_timeout_seconds,
    )
    try:
        await mongodb.init_db()
        await mongodb.client.admin.command("ping")
        logging.info(f"MongoDB connected. Using '{settings.mongo_collection}' collection.")
    except Exception as e:
        logging.error(f"MongoDB connection failed: {str(e)}")
        raise

    store = TransactionStore(
        mongodb.get_collection(settings.mongo_collection),
        timeout_seconds=settings.store_timeout_seconds,
    )
    app.state.mongodb = mongodb
    app.state.transaction_service = TransactionService(store, ViewInvalidator())


@app.on_event("shutdown")
def shutdown_db():
    mongodb = getattr(app.state, "mongodb", None)
    if mongodb is not None:
        mongodb.close()


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(transaction_router, prefix="/api", tags=["Transaction"])
