"""依赖元信息拉取器

职责:
- 通过 HTTP 查询远程插件目录（HttpMetadataService）
- 对全部必需 slug 各查询一次，成功的结果按服务返回的 slug 存储
- 失败的 slug 直接跳过：不重试、不保留部分记录、不向调用方抛出

查询彼此独立，max_workers > 1 时在线程池中并发执行，写入结果时加锁。
"""

from __future__ import annotations

import json
import logging
import threading
import urllib.error
import urllib.parse
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable

from plugdeps.core.exceptions import RegistryError
from plugdeps.core.models import FetchReport, RemoteMetadata
from plugdeps.core.protocols import DEFAULT_FIELDS, FetchObserver, MetadataService

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.wordpress.org/plugins/info/1.2/"
DEFAULT_TIMEOUT = 10.0


class HttpMetadataService:
    """插件目录 plugin_information 接口客户端"""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = "",
    ) -> None:
        from plugdeps.utils.net import validate_registry_url
        validate_registry_url(api_url, context="registry api")
        self.api_url = api_url
        self.timeout = timeout
        if not user_agent:
            from plugdeps import __version__
            user_agent = f"plugdeps/{__version__}"
        self.user_agent = user_agent

    def build_url(self, slug: str, fields: dict[str, bool]) -> str:
        params: list[tuple[str, str]] = [
            ("action", "plugin_information"),
            ("request[slug]", slug),
        ]
        for name, wanted in fields.items():
            params.append((f"request[fields][{name}]", "1" if wanted else "0"))
        sep = "&" if "?" in self.api_url else "?"
        return f"{self.api_url}{sep}{urllib.parse.urlencode(params)}"

    def query(self, slug: str, fields: dict[str, bool]) -> dict[str, Any]:
        req = urllib.request.Request(
            self.build_url(slug, fields),
            headers={"Accept": "application/json", "User-Agent": self.user_agent},
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
                body = resp.read()
        except urllib.error.HTTPError as e:
            raise RegistryError(slug, f"HTTP {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            # 超时 (TimeoutError) 也是 OSError
            raise RegistryError(slug, f"请求失败: {e}") from e

        try:
            data = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise RegistryError(slug, "响应不是合法 JSON") from e

        if not isinstance(data, dict):
            raise RegistryError(slug, "响应格式错误")
        if data.get("error"):
            raise RegistryError(slug, str(data["error"]))
        if not data.get("slug"):
            raise RegistryError(slug, "响应缺少 slug")
        return data


class MetadataFetcher:
    """对必需 slug 批量拉取元信息"""

    def __init__(
        self,
        service: MetadataService,
        max_workers: int = 1,
        observer: FetchObserver | None = None,
        fields: dict[str, bool] | None = None,
    ) -> None:
        self.service = service
        self.max_workers = max(1, max_workers)
        self.observer = observer
        self.fields = dict(fields or DEFAULT_FIELDS)
        self._lock = threading.Lock()

    def _fetch_one(self, slug: str, report: FetchReport) -> None:
        try:
            response = self.service.query(slug, self.fields)
            meta = RemoteMetadata.from_response(response, slug)
        except RegistryError as e:
            logger.warning("元信息拉取失败，跳过: %s", e)
            self._record_failure(slug, e, report)
            return
        except Exception as e:  # noqa: BLE001
            logger.exception("元信息拉取异常，跳过: %s", slug)
            self._record_failure(slug, e, report)
            return

        with self._lock:
            report.metadata[meta.slug] = meta
        if meta.slug != slug:
            logger.debug("服务返回的 slug 与查询不同: %s -> %s", slug, meta.slug)
        self._notify("on_success", slug)

    def _record_failure(self, slug: str, error: Exception, report: FetchReport) -> None:
        with self._lock:
            report.failed[slug] = str(error)
        self._notify("on_failure", slug, error)

    def _notify(self, event: str, *args: Any) -> None:
        """通知观察者；观察者自身出错只记日志，不中断拉取"""
        if self.observer is None:
            return
        try:
            getattr(self.observer, event)(*args)
        except Exception:
            logger.exception("拉取观察者在事件 '%s' 上出错", event)

    def fetch_all(self, slugs: Iterable[str]) -> FetchReport:
        """拉取全部 slug 的元信息，失败项记入 report.failed"""
        slugs = list(slugs)
        report = FetchReport()
        if not slugs:
            return report

        if self.max_workers == 1:
            for slug in slugs:
                self._fetch_one(slug, report)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self._fetch_one, s, report) for s in slugs]
                for future in futures:
                    future.result()

        # 并发写入顺序不定，按 slug 重排保证结果确定
        report.metadata = dict(sorted(report.metadata.items()))
        logger.info(
            "元信息拉取汇总: %d 成功, %d 失败%s",
            len(report.metadata),
            len(report.failed),
            f" ({', '.join(sorted(report.failed))})" if report.failed else "",
        )
        return report


class CountingObserver:
    """统计拉取成功 / 失败次数的观察者，线程安全"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.succeeded: list[str] = []
        self.failed: dict[str, str] = {}

    def on_success(self, slug: str) -> None:
        with self._lock:
            self.succeeded.append(slug)

    def on_failure(self, slug: str, error: Exception) -> None:
        with self._lock:
            self.failed[slug] = str(error)
