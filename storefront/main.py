# storefront/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.v1.routes import cart, categories, checkout, orders, payments, products, sections
from storefront.core.config import settings
from storefront.core.logging import configure_logging
from storefront.db.database import close_mongo_connection, connect_to_mongo

configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Incluir las rutas de los endpoints
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(categories.router, prefix="/api/v1/categories", tags=["Categories"])
app.include_router(sections.router, prefix="/api/v1/sections", tags=["Sections"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/api/v1/checkout", tags=["Checkout"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(payments.router, prefix="/api/v1/payments", tags=["Payments"])


@app.get("/")
async def ping():
    return {"message": "Pong"}


@app.on_event("startup")
async def startup_db_client():
    await connect_to_mongo()


@app.on_event("shutdown")
async def shutdown_db_client():
    await close_mongo_connection()
