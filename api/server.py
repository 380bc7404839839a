"""HTTP API for FIT power analysis."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from analyzers.power_analyzer import PowerAnalyzer
from config import settings
from models.results import PowerAnalysisResult
from parsers.fit_parser import FitDecoder, FitFileValidationError, validate_fit_file

logger = logging.getLogger(__name__)


class ParseFitRequest(BaseModel):
    file_path: Any = Field(default=None, alias='filePath')


def get_decoder() -> FitDecoder:
    return FitDecoder()


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content: Dict[str, Any] = {'error': error}
    if details is not None:
        content['details'] = details
    return JSONResponse(status_code=status_code, content=content)


def _success(result: PowerAnalysisResult) -> Dict[str, Any]:
    payload = {'success': True}
    payload.update(result.to_dict())
    payload['message'] = 'Power data found' if result.has_power_data else 'No power data in file'
    return payload


def _analyze_bytes(decoder: FitDecoder, data: bytes) -> PowerAnalysisResult:
    return PowerAnalyzer().analyze_activity(decoder.decode(data))


def create_app() -> FastAPI:
    application = FastAPI(title="Pedal Power Analyser API")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=['*'],
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @application.get('/')
    def root() -> Dict[str, str]:
        return {'message': 'Pedal Power Analyser API'}

    @application.get('/api/health')
    def health() -> Dict[str, str]:
        return {'status': 'OK', 'timestamp': datetime.now(timezone.utc).isoformat()}

    @application.post('/api/parse-fit')
    def parse_fit_file(request: Optional[ParseFitRequest] = Body(None),
                       decoder: FitDecoder = Depends(get_decoder)):
        file_path = request.file_path if request is not None else None
        if not file_path or not isinstance(file_path, str):
            return _error(status.HTTP_400_BAD_REQUEST, 'File path is required')

        try:
            path = validate_fit_file(file_path)
        except FitFileValidationError as e:
            logger.warning(f"Rejected file path {file_path}: {e}")
            return _error(status.HTTP_400_BAD_REQUEST, 'Invalid FIT file or file does not exist')

        try:
            result = PowerAnalyzer().analyze_activity(decoder.decode_file(path))
        except Exception as e:
            logger.error(f"Error parsing FIT file {path}: {e}")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Failed to parse FIT file', str(e))

        return _success(result)

    @application.post('/activity/parse')
    async def parse_fit_upload(request: Request, decoder: FitDecoder = Depends(get_decoder)):
        too_large = f"File exceeds the {settings.MAX_UPLOAD_BYTES} byte upload limit"
        content_length = request.headers.get('content-length')
        if content_length and content_length.isdigit() and int(content_length) > settings.MAX_UPLOAD_BYTES:
            return _error(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, too_large)

        # Chunked uploads carry no Content-Length, so count bytes as they arrive
        chunks = []
        received = 0
        async for chunk in request.stream():
            received += len(chunk)
            if received > settings.MAX_UPLOAD_BYTES:
                logger.warning(f"Rejected upload after {received} bytes")
                return _error(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, too_large)
            chunks.append(chunk)

        data = b''.join(chunks)
        if not data:
            return _error(status.HTTP_400_BAD_REQUEST, 'No file data received')

        logger.info(f"Analyzing uploaded FIT data ({len(data)} bytes)")
        try:
            result = await run_in_threadpool(_analyze_bytes, decoder, data)
        except Exception as e:
            logger.error(f"Error parsing uploaded FIT data: {e}")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Failed to parse FIT file', str(e))

        return _success(result)

    return application


app = create_app()
