"""
Services layer - Business logic goes here.

- report_service: submit/list reports (validation, refid, upload, persist)
- report_store: Firestore reads and writes for the reports collection
- upload_storage: photos on local disk
- validation: required-field checks run before any write
"""
