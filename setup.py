from setuptools import setup, find_packages

setup(
    name="userdesk",
    version="0.1",
    packages=find_packages(include=["userdesk", "userdesk.*"]),
    python_requires=">=3.9",
    install_requires=[
        "streamlit>=1.37",
        "requests",
        "python-dotenv",
        "pandas",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "pytest-cov",
            "pytest-mock",
        ],
    },
)
