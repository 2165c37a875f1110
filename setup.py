from os.path import abspath, dirname, join
from setuptools import setup

cwd = abspath(dirname(__file__))
readme = open(join(cwd, 'readme.rst'))
kwds = {'long_description': readme.read()}
readme.close()

setup(name='SparseCSC.py',
      version='1.0.0',
      description='SparseCSC.py: compressed-sparse-column operations and triangular solvers',
      author='Richard Lincoln',
      author_email='r.w.lincoln@gmail.com',
      url='http://www.cise.ufl.edu/research/sparse/CSparse/',
      install_requires=['numpy'],
      classifiers=['Development Status :: 4 - Beta',
            'Intended Audience :: Science/Research',
            'License :: OSI Approved :: GNU Lesser General Public License v2 or later (LGPLv2+)',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Topic :: Scientific/Engineering :: Mathematics'],
      py_modules=['sparsecsc'],
      test_suite='sparsecsc_test',
      zip_safe=True,
      **kwds)
