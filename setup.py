"""
Newsletter sign-up and credentials forms backed by the Mailchimp Marketing API
"""
from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    author='NYPR Digital',
    author_email='digitalops@nypublicradio.org',
    description=__doc__.strip(),
    install_requires=[
        'boto3~=1.21',
        'flask>=2.2',
        'markupsafe>=2.1',
        'python-dotenv',
        'requests',
        'sentry-sdk[flask]',
        'serverless-wsgi',
    ],
    extras_require={
        'test': [
            'dotmap',
            'moto>=5.0',
            'pytest',
            'pytest-cov',
            'pytest-env',
            'pytest-mock',
        ],
    },
    license='BSD',
    long_description=long_description,
    long_description_content_type="text/markdown",
    name='mailchimp-signup',
    package_data={},
    packages=['mailchimp_signup'],
    python_requires='>=3.8',
    scripts=[],
    url='https://github.com/nypublicradio/mailchimp-signup',
    version='0.0.0',
    zip_safe=True,
)
