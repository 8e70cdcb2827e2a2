"""LLM Module - estimator providers and response parsing."""
from offer_engine.llm.interfaces import EstimatorProvider
from offer_engine.llm.openai_service import OpenAIService, extract_json_object
from offer_engine.llm.schema_models import EstimatedBand, EstimatedScore

__all__ = ['EstimatorProvider', 'OpenAIService', 'extract_json_object', 'EstimatedBand', 'EstimatedScore']
