"""Tool registry: the single name-to-definition mapping shared by the loop and the tools."""

import asyncio
import inspect
import json
from typing import Any, Callable, Dict, Iterator, List, Optional, Union, cast

from pydantic import BaseModel, create_model

from ..models import ToolDefinition, ToolResult, ToolSpec
from ..schema import SchemaValidator, ToolParameterFactory
from ...exceptions import ToolExecutionError, ToolNotFoundError, ToolRegistrationError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

DEFAULT_TOOL_TIMEOUT = 180.0


class ToolRegistry:
    """
    A central registry to manage, list and dispatch the tools available to the agent.

    The registry is an explicit object built once by the process bootstrap and handed
    to the decision loop and to the tool factories. Registration happens at setup;
    afterwards the registry is only read.

    ``dispatch`` never raises for tool-level problems: unknown names, malformed
    arguments, timeouts and exceptions thrown by a tool are all turned into a
    ``ToolResult`` flagged with ``details["error"] = True``.
    """

    def __init__(self, tool_timeout: float = DEFAULT_TOOL_TIMEOUT) -> None:
        """Initialize the ToolRegistry.

        Args:
            tool_timeout: Maximum time in seconds a single tool execution may take.
        """
        self.tools: Dict[str, ToolDefinition] = {}
        self.tool_timeout = tool_timeout
        self.builtins_registered = False

    def register(
        self,
        name_or_tool: Union[str, ToolDefinition, Callable],
        description: Optional[str] = None,
        func: Optional[Callable] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> ToolDefinition:
        """
        Register a tool, replacing any existing tool with the same name.

        Accepts a ready ``ToolDefinition``, a documented callable (its definition and
        parameter schema are generated from the signature), or the individual
        components. Explicit schemas are forwarded to providers as-is.

        Args:
            name_or_tool: Either a `ToolDefinition` object, the name of the tool (str), or a Callable.
            description: What the tool does. Required with a name and explicit parameters.
            func: The callable implementing the tool. Required if `name_or_tool` is a string.
            parameters: JSON schema of the tool's input. Inferred from `func` when omitted.

        Returns:
            The definition that was stored.

        Raises:
            ToolRegistrationError: If individual arguments are provided but some are missing.
            ToolValidationError: If a callable lacks a docstring or parameter descriptions.
        """
        if isinstance(name_or_tool, ToolDefinition):
            tool = name_or_tool
        elif callable(name_or_tool):
            tool = self._generate_tool_definition(name_or_tool, description=description)
        else:
            if func is None:
                raise ToolRegistrationError("If passing name as string, func is required.")

            if parameters is None:
                tool = self._generate_tool_definition(func, name=name_or_tool, description=description)
            else:
                if description is None:
                    raise ToolRegistrationError("If passing name and parameters, description is required.")
                tool = ToolDefinition(name=name_or_tool, description=description, func=func, parameters=parameters)

        if tool.name in self.tools:
            logger.debug(f"Replacing previously registered tool '{tool.name}'.")

        self.tools[tool.name] = tool
        logger.debug(f"Registered tool: '{tool.name}'")
        return tool

    def unregister(self, tool_name: str) -> None:
        """Unregister a tool from the registry.

        Args:
            tool_name: The name of the tool to remove.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
        """
        if tool_name not in self.tools:
            raise ToolNotFoundError(f"Tool '{tool_name}' not found in the registry.")
        del self.tools[tool_name]
        logger.debug(f"Unregistered tool: '{tool_name}'")

    def tool(self, func: Callable) -> Callable:
        """A decorator to turn a function into an agent tool.

        Args:
            func: The function to decorate.

        Returns:
            The original function, after registering it as a tool.
        """
        self.register(func)
        return func

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self.tools.get(name)

    @property
    def names(self) -> List[str]:
        return list(self.tools)

    def __contains__(self, name: object) -> bool:
        return name in self.tools

    def __len__(self) -> int:
        return len(self.tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(list(self.tools.values()))

    def definitions(self) -> List[ToolDefinition]:
        """All registered definitions, in registration order."""
        return list(self.tools.values())

    def catalogue(self) -> List[ToolSpec]:
        """The tool catalogue shown to the model. Contains no callables."""
        return [tool.spec() for tool in self.tools.values()]

    async def dispatch(self, name: str, tool_input: Any = None) -> ToolResult:
        """Execute the tool registered under ``name``.

        Args:
            name: Tool name requested by the model.
            tool_input: Parameters requested by the model. A mapping, a JSON string or None.

        Returns:
            The tool's result, or an error-flagged result describing what went wrong.
        """
        tool = self.tools.get(name)
        if tool is None:
            msg = f"Unknown tool: {name}"
            logger.warning(msg)
            return ToolResult.failure(msg, tool_name=name)

        try:
            kwargs = self._normalize_arguments(tool_input)
            if tool.args_model is not None:
                kwargs = self._validate_arguments(tool.args_model, kwargs)

            logger.info(f"Executing tool '{name}'...")
            raw_result = await self._execute_tool(tool.func, kwargs)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.warning(f"Tool '{name}' failed: {message} ({type(exc).__name__})", exc_info=True)
            return ToolResult.failure(f'Tool "{name}" failed: {message}', tool_name=name, message=message)

        result = self._coerce_result(raw_result)
        if result.is_error:
            logger.warning(f"Tool '{name}' reported an error: {result.text[:200]}")
        else:
            logger.info(f"Tool '{name}' executed successfully.")
        return result

    @staticmethod
    def _normalize_arguments(raw_args: Any) -> Dict[str, Any]:
        """Normalize tool arguments into a dictionary.

        Raises:
            ToolValidationError: If the arguments are not a JSON object.
        """
        if raw_args is None or raw_args == "":
            return {}

        if isinstance(raw_args, dict):
            return dict(raw_args)

        if isinstance(raw_args, str):
            try:
                parsed = json.loads(raw_args)
            except json.JSONDecodeError as exc:
                raise ToolValidationError(f"Failed to decode arguments: {exc}") from exc
            if parsed is None:
                return {}
            if not isinstance(parsed, dict):
                raise ToolValidationError("Arguments must decode to a JSON object.")
            return parsed

        raise ToolValidationError(f"Arguments must be an object, got {type(raw_args).__name__}.")

    @staticmethod
    def _validate_arguments(args_model: type[BaseModel], kwargs: Dict[str, Any]) -> Dict[str, Any]:
        try:
            validated = args_model(**kwargs)
        except ValueError as exc:
            raise ToolValidationError(f"Argument validation failed: {exc}") from exc
        # Keep nested models as instances rather than dumping them back to dicts
        return {field: getattr(validated, field) for field in type(validated).model_fields}

    async def _execute_tool(self, tool_function: Callable, function_args: Dict[str, Any]) -> Any:
        """Execute the tool function, handling async/sync and timeouts.

        Raises:
            ToolExecutionError: If execution times out.
        """
        try:
            if inspect.iscoroutinefunction(tool_function):
                result = await asyncio.wait_for(tool_function(**function_args), timeout=self.tool_timeout)
            else:
                result = await asyncio.wait_for(
                    asyncio.to_thread(tool_function, **function_args),
                    timeout=self.tool_timeout,
                )
            if inspect.isawaitable(result):
                result = await asyncio.wait_for(result, timeout=self.tool_timeout)
            return result
        except asyncio.TimeoutError as exc:
            raise ToolExecutionError(f"Tool execution timed out after {self.tool_timeout} seconds.") from exc

    @staticmethod
    def _coerce_result(raw_result: Any) -> ToolResult:
        if isinstance(raw_result, ToolResult):
            return raw_result
        if raw_result is None:
            return ToolResult(content="")
        if isinstance(raw_result, (str, dict)):
            return ToolResult(content=raw_result)
        if isinstance(raw_result, BaseModel):
            return ToolResult(content=raw_result.model_dump(mode="json"))
        return ToolResult(content=json.dumps(raw_result, default=str))

    def _generate_tool_definition(
        self, func: Callable, name: Optional[str] = None, description: Optional[str] = None
    ) -> ToolDefinition:
        """Generate a ToolDefinition from a callable function.

        Args:
            func: The function to generate a definition for.
            name: Optional name override for the tool.
            description: Optional description override for the tool.

        Returns:
            A ToolDefinition object containing the tool's metadata and schema.

        Raises:
            ToolValidationError: If the function is missing a docstring or parameter descriptions.
        """
        tool_name = name or func.__name__
        if description is None:
            description = self._get_docstring_from_func(func, tool_name)

        fields: Dict[str, Any] = {}
        for param_name, param in inspect.signature(func).parameters.items():
            if param_name == "self":
                continue
            ft = ToolParameterFactory.build_field_tuple(param_name=param_name, param=param, tool_name=tool_name)
            fields[param_name] = (ft.annotation, ft.field)

        # create_model expects **field_definitions: Any
        args_model = create_model(f"{tool_name}Params", **cast(Dict[str, Any], fields))

        return ToolDefinition(
            name=tool_name,
            description=description,
            func=func,
            parameters=SchemaValidator.from_model(args_model),
            args_model=args_model,
        )

    @staticmethod
    def _get_docstring_from_func(func: Callable, tool_name: str) -> str:
        doc = inspect.getdoc(func)
        if not doc:
            msg = f"Tool '{tool_name}' missing docstring. LLMs need a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        return doc

    # Spelled last so the builtin ``list`` stays usable in the annotations above.
    list = definitions
