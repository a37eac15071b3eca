"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='structural-reflection',
	version='0.1.0',
	packages=['structural_reflection', ],
	entry_points={
		'console_scripts': ["structural-reflection = structural_reflection.cmdline:main"],
	},
	license='MIT',
	description='Structural subtyping and biased unification over Rust-like type shapes',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Topic :: Software Development :: Compilers",
		"Topic :: Software Development :: Libraries",
		"Environment :: Console",
	],
	python_requires='>=3.9',
	install_requires=[
		"booze-tools>=0.6.2.1",
	]
)
