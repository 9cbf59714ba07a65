from fastapi import FastAPI
from .routers.auth import router as auth_router
from .routers.users import router as users_router
from .routers.courses import router as courses_router
from .routers.reviews import router as reviews_router
from classconnect.utils import indexes

app = FastAPI(
    title="Class Connect API",
    version="1.0",
    description=(
        "A backend for course reviews, ratings, saved courses "
        "and peer tutoring"
    ),
)

# Include routers for different API sections
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(courses_router)
app.include_router(reviews_router)


# Health check endpoint
@app.get("/")
def read_root():
    return {"message": "Class Connect API is running", "version": "1.0"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.on_event("startup")
def startup_event() -> None:
    """Run startup tasks."""
    indexes.ensure_indexes()
