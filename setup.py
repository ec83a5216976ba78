from setuptools import setup, find_packages

setup(
    name="healthaccess",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "alembic", "alembic.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "alembic",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt<4.1",
        "python-multipart",
        "redis",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "websockets",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
