from setuptools import setup, find_packages

setup(name='vendorprune',
      version='0.1.0',
      description="Remove unused packages and files from a Go project's vendor directory",
      classifiers=[
          "Programming Language :: Python :: 3",
          "License :: OSI Approved :: MIT License",
          "Operating System :: POSIX",
      ],
      keywords='go vendor dependencies prune',
      license='MIT',
      packages=find_packages(),
      python_requires='>=3.9',
      install_requires=[
          'trio>=0.23',
          'outcome',
          'tree-sitter>=0.23',
          'tree-sitter-go>=0.23',
      ],
      entry_points={
          'console_scripts': [
              "vendorprune = vendorprune.main:main",
          ],
      },
)
