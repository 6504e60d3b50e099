#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Vibe Trade 服务启动程序

用法：
  python main.py                    使用 .env / 环境变量中的 HOST、PORT 启动
  python main.py --port 8080        覆盖监听端口
  python main.py --reload           开发模式自动重载
"""

import argparse

import uvicorn

from vibetrade.api.dependencies import get_settings


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Vibe Trade - AI 交易情报 API")
    parser.add_argument("--host", default=settings.HOST, help="监听地址")
    parser.add_argument("--port", type=int, default=settings.PORT, help="监听端口")
    parser.add_argument("--reload", action="store_true", default=settings.DEBUG,
                        help="代码变更时自动重载")
    return parser.parse_args()


def main():
    args = parse_args()
    print("=" * 60)
    print("Vibe Trade - AI Trading Intelligence API")
    print(f"Health check: http://{args.host}:{args.port}/health")
    print(f"API docs:     http://{args.host}:{args.port}/api/docs")
    print("=" * 60)
    uvicorn.run(
        "vibetrade.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
