"""gemdeploy: deploy a gemserver to Google App Engine Flex or Google Kubernetes Engine."""

__version__ = "0.1.0"
