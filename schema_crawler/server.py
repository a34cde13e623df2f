import threading
import time
from typing import Dict, List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from .config import get_database_config, get_db_type, get_server_config
from .database import DatabaseFactory, ErrorKind, ReferentialAction, SchemaCrawlerError
from .service import SchemaCrawlerService
from .utils.logger import configure_logging, setup_logger

logger = setup_logger(__name__)

app = FastAPI(title="Schema Crawler", version="0.1.0",
              description="API for accessing database schema information")
router = APIRouter(prefix="/api/schema", tags=["Database Schema"])

# Shared crawler service
_service_instance: Optional[SchemaCrawlerService] = None
_service_lock = threading.Lock()
_started_at = time.time()


def get_crawler_service() -> SchemaCrawlerService:
    global _service_instance
    with _service_lock:
        if _service_instance is None:
            adapter = DatabaseFactory.create_connector(get_db_type(), get_database_config())
            _service_instance = SchemaCrawlerService(adapter)
    return _service_instance


# Response Models
class _CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ColumnModel(_CamelModel):
    name: str
    data_type: str = Field(alias="type")
    size: int
    precision: int
    scale: int
    nullable: bool
    primary_key: bool = Field(alias="primaryKey")
    auto_increment: bool = Field(alias="autoIncrement")
    default_value: Optional[str] = Field(default=None, alias="defaultValue")
    comment: Optional[str] = None


class ForeignKeyModel(_CamelModel):
    name: str
    source_table: str = Field(alias="sourceTable")
    source_column: str = Field(alias="sourceColumn")
    target_table: str = Field(alias="targetTable")
    target_column: str = Field(alias="targetColumn")
    update_rule: ReferentialAction = Field(alias="updateRule")
    delete_rule: ReferentialAction = Field(alias="deleteRule")


class IndexModel(_CamelModel):
    name: str
    table_name: str = Field(alias="tableName")
    column_names: List[str] = Field(alias="columnNames")
    unique: bool
    index_type: str = Field(alias="type")


class TableModel(_CamelModel):
    name: str
    comment: Optional[str] = None
    row_count: int = Field(alias="rowCount")
    columns: List[ColumnModel]
    foreign_keys: List[ForeignKeyModel] = Field(alias="foreignKeys")
    primary_keys: List[str] = Field(alias="primaryKeys")
    indexes: List[IndexModel]


class MessageResponse(BaseModel):
    message: str


ERROR_RESPONSES = {
    404: {"description": "Table not found"},
    500: {"description": "Failed to read schema metadata"}
}

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CRAWL_FAILED: 500
}

DETAIL_BY_KIND: Dict[ErrorKind, str] = {
    ErrorKind.NOT_FOUND: "Table not found",
    ErrorKind.CRAWL_FAILED: "Failed to crawl database schema"
}


def to_http_error(error: SchemaCrawlerError) -> HTTPException:
    """Map a crawl failure to a response without leaking driver details"""
    return HTTPException(status_code=STATUS_BY_KIND.get(error.kind, 500),
                         detail=DETAIL_BY_KIND.get(error.kind, "Internal server error"))


@router.get("/tables", response_model=List[TableModel], responses={500: ERROR_RESPONSES[500]},
            summary="Get all tables",
            description="Retrieves the complete database schema including all tables")
def get_all_tables(service: SchemaCrawlerService = Depends(get_crawler_service)):
    logger.info("Request to get all tables")
    try:
        tables = service.crawl_schema()
    except SchemaCrawlerError as e:
        logger.error(f"Error retrieving tables: {e}")
        raise HTTPException(status_code=500, detail=DETAIL_BY_KIND[ErrorKind.CRAWL_FAILED])
    return [TableModel.model_validate(table) for table in tables]


@router.get("/tables/{table_name}", response_model=TableModel, responses=ERROR_RESPONSES,
            summary="Get table by name",
            description="Retrieves detailed information about a specific table")
def get_table(table_name: str, service: SchemaCrawlerService = Depends(get_crawler_service)):
    logger.info(f"Request to get table: {table_name}")
    try:
        table = service.crawl_table(table_name)
    except SchemaCrawlerError as e:
        logger.error(f"Error retrieving table {table_name}: {e}")
        raise to_http_error(e)
    return TableModel.model_validate(table)


@router.get("/tables/{table_name}/columns", response_model=List[ColumnModel], responses=ERROR_RESPONSES,
            summary="Get table columns",
            description="Retrieves all columns for a specific table")
def get_table_columns(table_name: str, service: SchemaCrawlerService = Depends(get_crawler_service)):
    logger.info(f"Request to get columns for table: {table_name}")
    try:
        columns = service.get_columns(table_name)
    except SchemaCrawlerError as e:
        logger.error(f"Error retrieving columns for table {table_name}: {e}")
        raise to_http_error(e)
    return [ColumnModel.model_validate(column) for column in columns]


@router.delete("/cache", response_model=MessageResponse, summary="Clear schema cache",
               description="Forgets all cached metadata so the next request crawls again")
def clear_cache(service: SchemaCrawlerService = Depends(get_crawler_service)):
    service.invalidate()
    return {"message": "Schema cache cleared"}


@router.delete("/cache/{table_name}", response_model=MessageResponse, summary="Clear cached table",
               description="Forgets cached metadata of one table and of the full table list")
def clear_table_cache(table_name: str, service: SchemaCrawlerService = Depends(get_crawler_service)):
    service.invalidate(table_name)
    return {"message": f"Schema cache cleared for table {table_name}"}


app.include_router(router)


@app.get("/status")
def status(service: SchemaCrawlerService = Depends(get_crawler_service)):
    """Get service status"""
    try:
        return {
            "status": "running",
            "database_type": get_db_type(),
            "cache": service.cache_info(),
            "uptime": time.time() - _started_at,
            "timestamp": time.time()
        }
    except Exception as e:
        logger.error(f"Error reading status: {e}")
        raise HTTPException(status_code=500, detail="Status unavailable")


def run():
    """Run the schema API server"""
    config = get_server_config()
    configure_logging(config['log_level'])
    uvicorn.run(app, host=config['host'], port=config['port'])


if __name__ == "__main__":
    run()
