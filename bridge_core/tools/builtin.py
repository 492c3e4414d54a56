"""内置工具处理器。

每个处理器接收已解析的参数字典，返回结果文本（JSON 字符串）；
可预期的失败通过 ToolError 抛出，由 ToolExecutor 转换为 ToolResult.error。

get_weather / search_web 只返回演示数据，没有外部副作用。
"""

import json
import random
from typing import Any, Callable, Dict

from bridge_core.domain.exceptions import CalculationError, ToolError
from bridge_core.tools import calculator


ToolFunc = Callable[[Dict[str, Any]], str]

WEATHER_CONDITIONS = ["sunny", "cloudy", "rainy", "snowy"]


def _require(args: Any, field: str) -> Any:
    value = args.get(field) if isinstance(args, dict) else None
    if not value:
        raise ToolError(
            code="MISSING_PARAMETER",
            message=f"Missing required parameter: {field}",
            field=field,
        )
    return value


def get_weather(args: Dict[str, Any]) -> str:
    location = _require(args, "location")
    weather = {
        "location": location,
        "temperature": random.randint(10, 39),
        "condition": random.choice(WEATHER_CONDITIONS),
        "humidity": random.randint(0, 99),
        "wind_speed": random.randint(5, 24),
    }
    return json.dumps(weather, ensure_ascii=False)


def search_web(args: Dict[str, Any]) -> str:
    query = _require(args, "query")
    results = {
        "query": query,
        "results": [
            {
                "title": f"Search result: {query}",
                "url": "https://example.com/1",
                "snippet": f'A summary of search results about "{query}".',
            },
            {
                "title": f"More about {query}",
                "url": "https://example.com/2",
                "snippet": "Details and related content.",
            },
        ],
    }
    return json.dumps(results, ensure_ascii=False)


def calculate(args: Dict[str, Any]) -> str:
    expression = _require(args, "expression")
    if not isinstance(expression, str):
        raise ToolError(code="CALCULATION_FAILED", message="Calculation failed: expression must be a string")
    # 先校验字符集：一旦清洗改变了字符串就拒绝执行，而不是计算截断后的表达式
    if calculator.sanitize(expression) != expression:
        raise ToolError(code="CALCULATION_FAILED", message="Calculation failed: Invalid characters in expression")
    try:
        result = calculator.evaluate(expression)
    except CalculationError as exc:
        raise ToolError(code="CALCULATION_FAILED", message=f"Calculation failed: {exc.message}")
    return json.dumps({"expression": expression, "result": result}, ensure_ascii=False)


def default_handlers() -> Dict[str, ToolFunc]:
    return {
        "get_weather": get_weather,
        "search_web": search_web,
        "calculate": calculate,
    }
