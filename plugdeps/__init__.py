"""plugdeps - 插件依赖解析

扫描已安装插件声明的 Requires Plugins 头，校验依赖 slug，
检测缺失依赖，并从远程插件目录获取依赖元信息。
"""

__version__ = "0.3.0"
