# Infrastructure - backend client, logging, utils
