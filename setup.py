"""
BusAlert Backend - Build Script

버스 도착 정보 조회 및 출발 시간 알림 FastAPI 서버
"""

from setuptools import setup, find_packages


setup(
    name='busalert',
    version='1.2.0',
    author='BusAlert Team',
    description='Bus arrival lookup and departure alert backend',
    long_description='''
    Korean bus arrival aggregation (Seoul/Gyeonggi BIS, national TAGO),
    walking time estimation and "leave now" departure alerts served over
    FastAPI REST and WebSocket endpoints.
    ''',
    packages=find_packages(include=['busalert', 'busalert.*']),
    install_requires=[
        'fastapi>=0.100.0',
        'uvicorn[standard]>=0.22.0',
        'pydantic>=2.0',
        'python-dotenv>=1.0.0',
        'redis>=4.5.0',
        'httpx>=0.24.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-asyncio>=0.21.0',
            'pytest-mock>=3.10.0',
        ],
    },
    zip_safe=False,
    python_requires='>=3.9',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Framework :: FastAPI',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
