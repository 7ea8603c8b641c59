"""
FastAPI REST API for the Notion schema compiler.

Parses schema text, renders it back, and compiles queries to Notion query JSON
without contacting Notion.
"""

import os
from typing import Optional, List, Dict, Any
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from notion_orm import NotionOrchestrator, NotionOrmConfig, NotionOrmError, parse_schema
from notion_orm.core.logging_config import configure_logging
from notion_orm.schema.emitter import SchemaEmitter

load_dotenv()
configure_logging(debug=os.getenv("NOTION_ORM_DEBUG", "").lower() in ("1", "true", "yes"))

app = FastAPI(
    title="Notion ORM API",
    description="Compile Notion model schemas and queries",
    version="0.1.0",
)


class SchemaRequest(BaseModel):
    """Request model carrying schema text."""
    schema_text: str = Field(..., description="Schema text with one or more model blocks")


class FieldResponse(BaseModel):
    name: str
    remote_name: str
    declared_type: str
    is_array: bool
    resolved_type: str
    optional: bool
    attributes: List[str]


class ModelResponse(BaseModel):
    name: str
    database_id: str
    fields: List[FieldResponse]


class ParseResponse(BaseModel):
    """Response model for schema parsing."""
    models: List[ModelResponse]
    skipped_lines: List[str]


class EmitResponse(BaseModel):
    schema_text: str


class FilterSpec(BaseModel):
    field: str = Field(..., description="Local field name or remote property name")
    operator: str = Field("equals", description="Filter operator")
    value: Any = None


class SortSpec(BaseModel):
    field: str
    direction: str = "ascending"


class CompileRequest(BaseModel):
    """Request model for query compilation."""
    schema_text: str = Field(..., description="Schema text with one or more model blocks")
    model: str = Field(..., description="Model to query")
    filters: List[FilterSpec] = Field(default_factory=list)
    sorts: List[SortSpec] = Field(default_factory=list)
    limit: Optional[int] = Field(None, description="Page size")
    cursor: Optional[str] = Field(None, description="Start cursor")


class CompileResponse(BaseModel):
    model: str
    query: Dict[str, Any]


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/schema/parse", response_model=ParseResponse)
async def parse(request: SchemaRequest):
    """Parse schema text into models with resolved property types."""
    try:
        schema = parse_schema(request.schema_text)
    except NotionOrmError as e:
        raise HTTPException(status_code=400, detail=f"Schema parsing failed: {str(e)}")

    return ParseResponse(
        models=[
            ModelResponse(
                name=model.name,
                database_id=model.database_id,
                fields=[
                    FieldResponse(
                        name=field.name,
                        remote_name=field.remote_name,
                        declared_type=field.declared_type,
                        is_array=field.is_array,
                        resolved_type=field.resolved_type.value,
                        optional=field.optional,
                        attributes=field.attributes,
                    )
                    for field in model.fields
                ],
            )
            for model in schema.models
        ],
        skipped_lines=schema.skipped_lines,
    )


@app.post("/schema/emit", response_model=EmitResponse)
async def emit(request: SchemaRequest):
    """Normalize schema text by parsing it and rendering it back."""
    try:
        schema = parse_schema(request.schema_text)
    except NotionOrmError as e:
        raise HTTPException(status_code=400, detail=f"Schema parsing failed: {str(e)}")
    return EmitResponse(schema_text=SchemaEmitter().emit(schema))


@app.post("/query/compile", response_model=CompileResponse)
async def compile_query(request: CompileRequest):
    """
    Compile a query on one model to Notion query JSON.

    Returns the query without executing it.
    """
    try:
        orchestrator = NotionOrchestrator.from_schema_text(
            request.schema_text, config=NotionOrmConfig()
        )
        builder = orchestrator.query(request.model)
        for spec in request.filters:
            builder.where(spec.field, spec.operator, spec.value)
        for sort in request.sorts:
            builder.order_by(sort.field, sort.direction)
        if request.limit is not None:
            builder.limit(request.limit)
        if request.cursor:
            builder.after(request.cursor)
        query = builder.build_query()
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))
    except (NotionOrmError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Query compilation failed: {str(e)}")

    return CompileResponse(model=request.model, query=query)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("API_PORT", "8000"))
    host = os.getenv("API_HOST", "0.0.0.0")

    uvicorn.run(app, host=host, port=port)
