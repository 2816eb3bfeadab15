from couchbase_installer.cli import main

main()
