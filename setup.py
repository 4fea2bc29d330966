from setuptools import setup, find_packages

setup(
    name="employee-gateway",
    version="0.1.0",
    packages=find_packages(include=["employee_gateway", "employee_gateway.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "starlette>=0.36",
        "pydantic>=2.7",
        "pydantic-settings>=2.3",
        "httpx>=0.27",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "respx>=0.21",
        ],
    },
)
