import logging

from dotenv import load_dotenv
from fastapi import Body, FastAPI, HTTPException

from smartfinance.ai import advice_client
from smartfinance.core.errors import AdviceGenerationFailed, ValidationError
from smartfinance.core.models import AdviceRequest, AnalysisResult, BreakdownResponse, HealthResponse, UserProfile
from smartfinance.core.sample_payloads import SAMPLE_REQUEST
from smartfinance.core.tools import cash_flow_breakdown, context_breakdown, savings_capacity
from smartfinance.core.wizard import ADVICE_FAILED_MESSAGE, validate_profile_step, validate_topic_step
from smartfinance.logs import setup_logging

load_dotenv()
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="SmartFinance Advisor API")


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", advice_backend=advice_client.check_backend_online())


@app.post("/advice", response_model=AnalysisResult)
async def advice(payload: AdviceRequest = Body(examples=[SAMPLE_REQUEST])):
    try:
        validate_profile_step(payload.profile)
        validate_topic_step(payload.topics)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    try:
        return await advice_client.generate_advice(payload.profile, set(payload.topics))
    except AdviceGenerationFailed as exc:
        logger.error("Advice request failed: %s", exc)
        raise HTTPException(status_code=502, detail=ADVICE_FAILED_MESSAGE) from exc


@app.post("/breakdown", response_model=BreakdownResponse)
def breakdown(profile: UserProfile):
    return BreakdownResponse(
        savings_capacity=savings_capacity(profile),
        cash_flow=cash_flow_breakdown(profile),
        context=context_breakdown(profile),
    )
