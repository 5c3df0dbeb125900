from collections.abc import Awaitable
from functools import wraps
from inspect import iscoroutinefunction
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import ExtraField, custom_logger
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    enter_call,
    get_chain_start_time,
    mask_sensitive,
    reset_call_depth,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])


class LoguruIO:
    """Decorator that logs arguments, return values and raised errors of the wrapped call."""

    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = True
    ) -> None:
        self._custom_logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self.extra: dict[str, Any] = {}
        self.depth = 2

    def _bound(self) -> 'LoguruLogger':
        return self._custom_logger.bind(**self.extra).opt(depth=self.depth)

    def _render(self, data: Any) -> Any:
        masked = mask_sensitive(data)
        return truncate_content(masked) if self.truncate_content else masked

    def log_args_kwargs_content(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        enter_call()
        self.extra[ExtraField.CHAIN_START_TIME] = get_chain_start_time()
        if settings.DEBUG:
            self._bound().debug(f'args: {self._render(args)}, kwargs: {self._render(kwargs)}')

    def log_return_content(self, return_value: Any) -> None:
        if settings.DEBUG:
            self._bound().debug(f'return: {self._render(return_value)}')

    def log_exception(self, e: Exception) -> None:
        # An error bubbling through several decorated layers is logged once, at the deepest one
        if getattr(e, '_has_logged', False):
            return
        e._has_logged = True  # type: ignore[attr-defined]
        if isinstance(e, CustomBaseError):
            self._bound().error(f'{type(e).__name__}: {e}')
        else:
            self._bound().exception(f'{type(e).__name__}: {e}')

    def __call__(self, func: _F) -> _F:
        self.extra[ExtraField.CALL_TARGET] = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    self.log_args_kwargs_content(args, kwargs)
                    return_value = await cast(Awaitable[Any], func(*args, **kwargs))
                    self.log_return_content(return_value)
                    return return_value
                except Exception as e:
                    self.log_exception(e)
                    if self.reraise:
                        raise
                    return None
                finally:
                    reset_call_depth()

            return cast(_F, async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                self.log_args_kwargs_content(args, kwargs)
                return_value = func(*args, **kwargs)
                self.log_return_content(return_value)
                return return_value
            except Exception as e:
                self.log_exception(e)
                if self.reraise:
                    raise
                return None
            finally:
                reset_call_depth()

        return cast(_F, sync_wrapper)


_P = ParamSpec('_P')
_T = TypeVar('_T')


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        if func:
            return LoguruIO(
                custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
            )(func)
        return LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
