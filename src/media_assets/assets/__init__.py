"""Asset records: models, upload validation, the upload pipeline and the service facade."""
