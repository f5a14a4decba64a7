# Import necessary modules and libraries for the application
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn
from dotenv import load_dotenv
import logging

from app.resolve_router import router as resolve_router
from app.agents.scripture_agent import ScriptureAgent
from db.db import create_tables, engine
from utils.config import EMBEDDING_MODEL
from utils.embedding import SemanticSearchService

# Load environment variables
load_dotenv()

# Configure root logging for local runs
logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting Voice Bible resolver...")
    await create_tables()

    semantic_search = SemanticSearchService(EMBEDDING_MODEL)
    try:
        await semantic_search.init()
        app.state.semantic_search = semantic_search
    except Exception as e:
        logger.warning("Semantic search unavailable: %s", str(e))
        app.state.semantic_search = None

    scripture_agent = ScriptureAgent()
    scripture_agent.init()
    app.state.scripture_agent = scripture_agent if scripture_agent.is_ready else None

    logger.info("Resolver API is ready")

    yield

    # Shutdown
    logger.info("Shutting down Voice Bible resolver...")
    await engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="Voice Bible Resolver",
    description="Resolves spoken or typed phrases to Bible verse references, topics and search results",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(resolve_router)


@app.get("/health")
async def root_health():
    """Root health check"""
    semantic_search = getattr(app.state, "semantic_search", None)
    return {
        "status": "healthy",
        "message": "Voice Bible Resolver API",
        "version": "1.0.0",
        "semantic_search": await semantic_search.health_check() if semantic_search is not None else {"status": "disabled"},
        "question_answering": getattr(app.state, "scripture_agent", None) is not None,
        "docs": "/docs"
    }


if __name__ == "__main__":
    # Development server
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
