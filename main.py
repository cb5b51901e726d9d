from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS
from database.conexion import Base, engine
import models  # asegura que todos los modelos estén registrados
from utils.logging_utils import log_event

Base.metadata.create_all(bind=engine)
log_event("startup", "sistema", "Tablas creadas (o ya existian)")

app = FastAPI(title="Ocupación de parcelas")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from endpoints import parcelas
app.include_router(parcelas.router)


@app.get("/")
def read_root():
    return {"message": "Ocupación de parcelas"}
