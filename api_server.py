# api_server.py
import os
import logging
from pathlib import Path

from dotenv import load_dotenv  # pip install python-dotenv
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ConfigDict

# =========================
# ENV 로딩 (.env 가 있으면)
# =========================
ENV_FILE = Path(__file__).with_name(".env")
if ENV_FILE.exists():
    load_dotenv(dotenv_path=ENV_FILE, override=False, encoding="utf-8")

# --- 로깅 기본 설정 ---
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("ganzhi_api")

from ganzhi import (
    FourPillars,
    LATE_ZI_INDEX,
    get_heavenly_stem_and_earthly_branch_by_lunar_date,
    get_heavenly_stem_and_earthly_branch_by_solar_date,
    heavenly_stem_and_earthly_branch_of_year,
    time_index_from_hour,
)

app = FastAPI(title="Ganzhi API", version="1.0")

# CORS (개발: * 허용, 운영: ALLOWED_ORIGINS)
def get_cors_origins():
    """환경에 따른 CORS 설정"""
    env = os.environ.get("ENV", "development")
    if env == "production":
        allowed_origins = os.environ.get("ALLOWED_ORIGINS", "").split(",")
        return [origin.strip() for origin in allowed_origins if origin.strip()]
    return ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------
# 요약 문장
# -------------------------
def generate_text_report(result: FourPillars) -> str:
    names = ("年柱", "月柱", "日柱", "时柱")
    pillars = (result.yearly, result.monthly, result.daily, result.timely)
    return " / ".join(f"{name} {''.join(p)}" for name, p in zip(names, pillars))

def _respond(result: FourPillars, include_text_report: bool) -> dict:
    body = {"ok": True, "payload": result.as_dict()}
    if include_text_report:
        body["text_report"] = generate_text_report(result)
    return body

# -------------------------
# 요청 스키마
# -------------------------
class SolarRequest(BaseModel):
    date: str                                           # "YYYY-MM-DD"
    time_index: int = Field(0, ge=0, le=LATE_ZI_INDEX)  # 0=子 ... 11=亥, 12=晚子
    include_text_report: bool = True

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"date": "2023-07-04", "time_index": 2, "include_text_report": True}
        }
    )

class LunarRequest(SolarRequest):
    is_leap: bool = False

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"date": "2023-05-17", "time_index": 2, "is_leap": False, "include_text_report": True}
        }
    )

@app.get("/health")
def health():
    return {"ok": True}

@app.post("/api/ganzhi/solar")
def calc_solar(req: SolarRequest):
    try:
        result = get_heavenly_stem_and_earthly_branch_by_solar_date(req.date, req.time_index)
    except ValueError as e:
        logger.warning("solar calc failed for %r: %s", req.date, e)
        raise HTTPException(status_code=400, detail=f"Invalid input: {e}")
    return _respond(result, req.include_text_report)

@app.post("/api/ganzhi/lunar")
def calc_lunar(req: LunarRequest):
    try:
        result = get_heavenly_stem_and_earthly_branch_by_lunar_date(req.date, req.time_index, req.is_leap)
    except ValueError as e:
        logger.warning("lunar calc failed for %r (leap=%s): %s", req.date, req.is_leap, e)
        raise HTTPException(status_code=400, detail=f"Invalid input: {e}")
    return _respond(result, req.include_text_report)

# 브라우저 GET 테스트용
@app.get("/api/ganzhi/solar")
def calc_solar_get(date: str, time_index: int = Query(0, ge=0, le=LATE_ZI_INDEX), include_text_report: bool = True):
    req = SolarRequest(date=date, time_index=time_index, include_text_report=include_text_report)
    return calc_solar(req)

@app.get("/api/ganzhi/lunar")
def calc_lunar_get(date: str, time_index: int = Query(0, ge=0, le=LATE_ZI_INDEX), is_leap: bool = False, include_text_report: bool = True):
    req = LunarRequest(date=date, time_index=time_index, is_leap=is_leap, include_text_report=include_text_report)
    return calc_lunar(req)

# -------------------------
# 폼 입력(년/월/일/시)용
# -------------------------
class AnalyzeRequest(BaseModel):
    year: int; month: int; day: int
    hour: int = Field(..., ge=0, le=23)
    calendar: str = Field("solar", pattern="^(solar|lunar)$")
    is_leap: bool = False
    include_text_report: bool = True

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"year": 2023, "month": 7, "day": 4, "hour": 4, "calendar": "solar"}
        }
    )

@app.post("/api/ganzhi/analyze")
def analyze(req: AnalyzeRequest):
    date_str = f"{req.year:04d}-{req.month:02d}-{req.day:02d}"
    time_index = time_index_from_hour(req.hour)
    if req.calendar == "lunar":
        return calc_lunar(LunarRequest(date=date_str, time_index=time_index, is_leap=req.is_leap,
                                       include_text_report=req.include_text_report))
    return calc_solar(SolarRequest(date=date_str, time_index=time_index,
                                   include_text_report=req.include_text_report))

@app.get("/api/ganzhi/year/{year}")
def year_pillar(year: int):
    stem, branch = heavenly_stem_and_earthly_branch_of_year(year)
    return {"ok": True, "year": year, "stem": stem, "branch": branch, "text": stem + branch}

# -------------------------
# Entrypoint
# -------------------------
if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run("api_server:app", host="0.0.0.0", port=port, reload=True)
