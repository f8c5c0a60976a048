import logging
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Dict, Optional, List

from Expressions import ExpressionError, parse
from Expressions.differentiator import Differentiator
from Expressions.numeric import check_variable_name
from Expressions.serializer import to_latex

# Random polynomial generator
from generate_expression import generate_random_expression

# -------------------------------------------------------------------
# Setup
# -------------------------------------------------------------------
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:4000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------------------------------------------------
# Health Endpoints
# -------------------------------------------------------------------
@app.get("/ping")
async def ping():
    logger.info("Uptime ping received")
    return {"status": "ok", "message": "Backend is alive"}

@app.get("/uptime")
async def uptime():
    return {"status": "alive"}

# -------------------------------------------------------------------
# Pydantic Models
# -------------------------------------------------------------------
class ExpressionInput(BaseModel):
    expression: str


class DifferentiateInput(BaseModel):
    expression: str
    variable: str = 'x'


class SubstituteInput(BaseModel):
    expression: str
    environment: Dict[str, float] = {}


class EqualsInput(BaseModel):
    left: str
    right: str


class GenerationInput(BaseModel):
    num_terms: Optional[int] = 3
    max_depth: Optional[int] = 2
    variables: Optional[List[str]] = ['x']

# -------------------------------------------------------------------
# Error Mapping
# -------------------------------------------------------------------
def bad_request(e: ExpressionError) -> HTTPException:
    logger.debug(f"Rejected expression input: {e}")
    return HTTPException(status_code=400, detail=str(e))

# -------------------------------------------------------------------
# API Endpoints
# -------------------------------------------------------------------
@app.post("/parse")
async def parse_expression(input_data: ExpressionInput):
    try:
        expression = parse(input_data.expression)
    except ExpressionError as e:
        raise bad_request(e)

    return {
        "expression": str(expression),
        "latex": to_latex(expression),
        "variables": sorted(expression.variables()),
    }

@app.post("/differentiate")
async def differentiate_expression(input_data: DifferentiateInput):
    logger.debug(f"Differentiate request: {input_data.expression} wrt {input_data.variable}")
    try:
        expression = parse(input_data.expression)
        differentiator = Differentiator(input_data.variable)
        derivative = differentiator.run(expression)
    except ExpressionError as e:
        raise bad_request(e)

    return {
        "derivative": str(derivative),
        "latex": to_latex(derivative),
        "steps": differentiator.steps,
    }

@app.post("/substitute")
async def substitute_expression(input_data: SubstituteInput):
    try:
        result = parse(input_data.expression).substitute(input_data.environment)
    except ExpressionError as e:
        raise bad_request(e)

    return {
        "expression": str(result),
        "latex": to_latex(result),
    }

@app.post("/equals")
async def compare_expressions(input_data: EqualsInput):
    try:
        left = parse(input_data.left)
        right = parse(input_data.right)
    except ExpressionError as e:
        raise bad_request(e)

    return {
        "equal": left == right,
        "left_hash": hash(left),
        "right_hash": hash(right),
    }

@app.post("/generate")
async def generate_expression_endpoint(input_data: GenerationInput):
    try:
        for name in input_data.variables:
            check_variable_name(name)
    except ExpressionError as e:
        raise bad_request(e)

    try:
        expr_sym, expr_str, expr_latex = generate_random_expression(
            variables=input_data.variables,
            num_terms=input_data.num_terms,
            max_depth=input_data.max_depth
        )

        return {
            "expression_string": expr_str,
            "expression_latex": expr_latex
        }

    except Exception as e:
        logger.error("Generation error", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Generation failed: {str(e)}"
        )
