from sqlalchemy import Column, String, DateTime, Integer, Text, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
from .connection import Base
from ..models.transcription import TranscriptionStatus
import uuid


class JobRecord(Base):
    __tablename__ = "jobs"

    # Chave primária
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Status e timestamps
    status = Column(
        SQLEnum(TranscriptionStatus, values_callable=lambda enum: [s.value for s in enum]),
        nullable=False,
        default=TranscriptionStatus.PENDING,
        index=True,
    )
    task = Column(String, nullable=False, default="transcribe")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Origem da mídia
    file_name = Column(String, nullable=True)
    source_url = Column(String, nullable=True)

    # Parâmetros para o serviço de ASR
    language = Column(String, default="auto", nullable=False)
    model_size = Column(String, default="small", nullable=False)
    device = Column(String, default="cpu", nullable=False)
    beam_size = Column(Integer, nullable=True)
    initial_prompt = Column(Text, nullable=True)
    hotwords = Column(JSON, nullable=False, default=list)

    # Resultados
    result = Column(JSON, nullable=True)
    translations = Column(JSON, nullable=False, default=list)
    error_message = Column(Text, nullable=True)

    def to_dict(self):
        """Converte o modelo SQLAlchemy para dicionário"""
        return {
            "id": self.id,
            "status": self.status,
            "task": self.task,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "file_name": self.file_name,
            "source_url": self.source_url,
            "language": self.language,
            "model_size": self.model_size,
            "device": self.device,
            "beam_size": self.beam_size,
            "initial_prompt": self.initial_prompt,
            "hotwords": self.hotwords or [],
            "result": self.result,
            "translations": self.translations or [],
            "error_message": self.error_message,
        }
