from setuptools import setup, find_packages


setup(
    name='payment-bridge',
    version='0.1.0',
    license='BSD',
    description=(
        "Correlates one-way payment requests to an external terminal "
        "handler with its asynchronous replies"
    ),
    long_description=__doc__,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: Office/Business :: Financial :: Point-Of-Sale',
    ],
    install_requires=[
    ],
    packages=find_packages(),
    test_suite='payment_bridge.tests.suite',
)
